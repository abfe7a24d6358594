import pandas as pd
import openpyxl
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter
import logging
from io import BytesIO
from typing import Optional, List

from models import Student, SchoolClass
from validation import VALID_GENDERS, is_valid_name


class ExcelHandler:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_roster(self, filepath: str) -> Optional[List[Student]]:
        """
        Read class students from an Excel file.
        Expected columns: First Name, Last Name, Age, Gender
        """
        try:
            df = pd.read_excel(filepath)

            # Normalize column names (handle case variations and spaces)
            df.columns = df.columns.astype(str).str.strip().str.lower().str.replace(' ', '_')

            column_mappings = {
                'first_name': ['first_name', 'firstname', 'prenom', 'prénom'],
                'last_name': ['last_name', 'lastname', 'nom', 'surname'],
                'age': ['age', 'âge'],
                'gender': ['gender', 'genre', 'sexe', 'sex'],
            }

            mapped_columns = {}
            for expected_col, possible_names in column_mappings.items():
                for possible_name in possible_names:
                    if possible_name in df.columns:
                        mapped_columns[expected_col] = possible_name
                        break

            missing_columns = [col for col in column_mappings if col not in mapped_columns]
            if missing_columns:
                self.logger.error(f"Missing columns: {missing_columns}")
                return None

            result_df = pd.DataFrame()
            for standard_name, original_name in mapped_columns.items():
                result_df[standard_name] = df[original_name]

            result_df = self._clean_roster_data(result_df)

            return [
                Student(
                    first_name=row['first_name'],
                    last_name=row['last_name'],
                    age=int(row['age']),
                    gender=row['gender'],
                )
                for row in result_df.to_dict('records')
            ]

        except Exception as e:
            self.logger.error(f"Error reading Excel file: {str(e)}")
            return None

    def _clean_roster_data(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Drop incomplete rows and rows the registration form would reject.
        """
        df = df.dropna(subset=['first_name', 'last_name', 'age', 'gender']).copy()

        for col in ['first_name', 'last_name', 'gender']:
            df[col] = df[col].astype(str).str.strip()

        # Standardize gender values
        gender_mapping = {
            'masculin': 'Masculin', 'm': 'Masculin', 'male': 'Masculin',
            'féminin': 'Féminin', 'feminin': 'Féminin', 'f': 'Féminin', 'female': 'Féminin',
            'autre': 'Autre', 'other': 'Autre',
        }
        df['gender'] = df['gender'].str.lower().map(gender_mapping).fillna(df['gender'])

        df['age'] = pd.to_numeric(df['age'], errors='coerce')
        df = df.dropna(subset=['age'])

        valid = (
            df['first_name'].map(is_valid_name)
            & df['last_name'].map(is_valid_name)
            & df['gender'].isin(VALID_GENDERS)
            & (df['age'] >= 0)
        )
        dropped = int((~valid).sum())
        if dropped:
            self.logger.warning(f"Skipped {dropped} invalid roster rows")

        return df[valid]

    def export_roster(self, school_class: SchoolClass) -> Optional[BytesIO]:
        """
        Export the class roster to an in-memory Excel workbook.
        """
        try:
            wb = openpyxl.Workbook()
            ws = wb.active
            ws.title = "Promo"

            header_font = Font(bold=True, size=12, color="FFFFFF")
            header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
            border = Border(
                left=Side(style='thin'),
                right=Side(style='thin'),
                top=Side(style='thin'),
                bottom=Side(style='thin')
            )
            center_alignment = Alignment(horizontal='center', vertical='center')

            ws['A1'] = f"{school_class.name} - {school_class.level}"
            ws['A1'].font = Font(bold=True, size=14)
            ws.merge_cells('A1:E1')

            ws['A2'] = f"Filière : {school_class.field}"
            ws.merge_cells('A2:E2')

            headers = ['#', 'Prénom', 'Nom', 'Âge', 'Genre']
            for col, header in enumerate(headers, 1):
                cell = ws.cell(row=4, column=col, value=header)
                cell.font = header_font
                cell.fill = header_fill
                cell.border = border
                cell.alignment = center_alignment

            row_num = 5
            for position, student in enumerate(school_class.students, 1):
                row_data = [position, student.first_name, student.last_name, student.age, student.gender]
                for col, value in enumerate(row_data, 1):
                    cell = ws.cell(row=row_num, column=col, value=value)
                    cell.border = border
                    cell.alignment = center_alignment
                row_num += 1

            ws.cell(row=row_num + 1, column=1, value="Effectif :").font = Font(bold=True)
            ws.cell(row=row_num + 1, column=2, value=school_class.student_count)

            # Auto-adjust column widths
            for col_idx in range(1, len(headers) + 1):
                max_length = 0
                column_letter = get_column_letter(col_idx)
                for row_idx in range(3, row_num + 2):
                    cell = ws.cell(row=row_idx, column=col_idx)
                    if cell.value:
                        max_length = max(max_length, len(str(cell.value)))
                ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

            output = BytesIO()
            wb.save(output)
            output.seek(0)

            self.logger.info(f"Exported roster of {school_class.student_count} students")
            return output

        except Exception as e:
            self.logger.error(f"Error exporting roster: {str(e)}")
            return None
