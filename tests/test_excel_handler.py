import os
from io import BytesIO

import openpyxl
import pandas as pd

from app import create_app
from excel_handler import ExcelHandler
from models import default_class


def write_roster(path, rows, columns=('First Name', 'Last Name', 'Age', 'Gender')):
    pd.DataFrame(rows, columns=list(columns)).to_excel(path, index=False, engine='openpyxl')
    return str(path)


def test_export_roster_builds_workbook_in_memory():
    output = ExcelHandler().export_roster(default_class())

    assert output is not None
    ws = openpyxl.load_workbook(output).active
    assert ws['A1'].value == 'B1 Informatique - Bachelor 1'
    assert [ws.cell(row=4, column=c).value for c in range(1, 6)] == ['#', 'Prénom', 'Nom', 'Âge', 'Genre']
    assert [ws.cell(row=r, column=3).value for r in range(5, 8)] == ['Dupont', 'Martin', 'Gustav']


def test_read_roster_maps_and_cleans_rows(tmp_path):
    path = write_roster(tmp_path / 'roster.xlsx', [
        ['Alice', 'Durand', 22, 'f'],
        ['Bob', 'Leroy', 23, 'Masculin'],
        ['C4rl', 'Petit', 20, 'Autre'],
        ['Denis', None, 21, 'm'],
        ['Eve', 'Moreau', 'vingt', 'Autre'],
    ])
    students = ExcelHandler().read_roster(path)

    assert [(s.first_name, s.last_name, s.age, s.gender) for s in students] == [
        ('Alice', 'Durand', 22, 'Féminin'),
        ('Bob', 'Leroy', 23, 'Masculin'),
    ]


def test_read_roster_missing_columns(tmp_path):
    path = write_roster(tmp_path / 'roster.xlsx', [['Alice', 22]], columns=('First Name', 'Age'))
    assert ExcelHandler().read_roster(path) is None


def test_read_roster_unreadable_file(tmp_path):
    assert ExcelHandler().read_roster(str(tmp_path / 'missing.xlsx')) is None


def test_app_seeds_roster_from_file(tmp_path):
    path = write_roster(tmp_path / 'roster.xlsx', [['Alice', 'Durand', 22, 'Féminin']])
    app = create_app({'TESTING': True, 'ROSTER_FILE': path})
    snapshot = app.config['SCHOOL_STATE'].snapshot()
    assert snapshot.student_count == 1
    assert snapshot.students[0].last_name == 'Durand'


def test_app_falls_back_to_default_roster(tmp_path):
    app = create_app({'TESTING': True, 'ROSTER_FILE': str(tmp_path / 'missing.xlsx')})
    assert app.config['SCHOOL_STATE'].snapshot().student_count == 3


def test_promo_export_route(client, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    response = client.get('/promo/export')
    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert 'attachment' in response.headers['Content-Disposition']
    assert 'promo_export_' in response.headers['Content-Disposition']

    ws = openpyxl.load_workbook(BytesIO(response.data)).active
    assert [ws.cell(row=r, column=3).value for r in range(5, 8)] == ['Dupont', 'Martin', 'Gustav']
    # nothing is written to disk
    assert os.listdir(tmp_path) == []


def test_generated_test_data_loads_back(tmp_path):
    from create_test_data import create_roster_test_data

    output_file, df = create_roster_test_data(8, str(tmp_path / 'promo.xlsx'), seed=1234)
    assert len(df) == 8

    students = ExcelHandler().read_roster(output_file)
    assert len(students) == 8
    assert all(17 <= s.age <= 25 for s in students)
