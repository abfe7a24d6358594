#!/usr/bin/env python3
"""
Create a sample roster workbook that can be loaded at startup with ROSTER_FILE.
"""
import random
import sys

import pandas as pd
from faker import Faker

from validation import is_valid_name


def create_roster_test_data(student_count=25, output_file='promo_test_data.xlsx', seed=None):
    """Create realistic student data for the B1 Informatique class."""
    fake = Faker('fr_FR')
    if seed is not None:
        Faker.seed(seed)
        random.seed(seed)

    students_data = []
    while len(students_data) < student_count:
        gender = random.choice(['Masculin', 'Féminin', 'Autre'])
        if gender == 'Masculin':
            first_name = fake.first_name_male()
        elif gender == 'Féminin':
            first_name = fake.first_name_female()
        else:
            first_name = fake.first_name()
        last_name = fake.last_name()

        # Faker can produce apostrophes ("D'Hondt") that the form rejects
        if not (is_valid_name(first_name) and is_valid_name(last_name)):
            continue

        students_data.append({
            'First Name': first_name,
            'Last Name': last_name,
            'Age': random.randint(17, 25),
            'Gender': gender,
        })

    df = pd.DataFrame(students_data)
    df.to_excel(output_file, index=False, engine='openpyxl')

    print(f"✅ Roster test data created: '{output_file}'")
    print(f"📊 Total students: {len(df)}")
    print(f"👥 Gender distribution: {df['Gender'].value_counts().to_dict()}")

    return output_file, df


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 25
    output_file, _ = create_roster_test_data(count)
    print(f"📁 Start the app with ROSTER_FILE={output_file} to use it")
