from dataclasses import fields

import pytest

from user_cookie import MalformedCookieError, UserData, decode_user_cookie, encode_user_cookie


def test_encode_joins_five_fields_in_order():
    user = UserData(first_name='Marie', last_name='Curie', birth_date='1990-05-01',
                    gender='Féminin', age=34)
    assert encode_user_cookie(user) == 'Marie|Curie|1990-05-01|Féminin|34'


def test_decode_restores_fields():
    user = decode_user_cookie('Marie|Curie|1990-05-01|Féminin|34')
    assert (user.first_name, user.last_name, user.birth_date, user.gender, user.age) == \
        ('Marie', 'Curie', '1990-05-01', 'Féminin', 34)


@pytest.mark.parametrize('value', ['', 'Marie|Curie', 'a|b|c|d|e|f', 'Marie|Curie|1990-05-01|Féminin'])
def test_decode_rejects_wrong_field_count(value):
    with pytest.raises(MalformedCookieError) as excinfo:
        decode_user_cookie(value)
    assert 'fields' in excinfo.value.reason


def test_decode_keeps_names_when_age_is_not_an_integer():
    user = decode_user_cookie('Marie|Curie|1990-05-01|Féminin|trente')
    assert (user.first_name, user.last_name, user.age) == ('Marie', 'Curie', 0)


def test_malformed_cookie_error_is_a_value_error():
    with pytest.raises(ValueError):
        decode_user_cookie('nope')


def test_from_form_strips_values():
    form = {'lastname': ' Curie ', 'firstname': 'Marie ', 'birthdate': '1990-05-01', 'gender': 'Féminin'}
    user = UserData.from_form(form)
    assert user.last_name == 'Curie'
    assert user.first_name == 'Marie'
    assert user.age == 0
    assert user.is_form_success is False


def test_user_data_holds_cookie_fields_and_success_flag_only():
    assert [f.name for f in fields(UserData)] == \
        ['first_name', 'last_name', 'birth_date', 'gender', 'age', 'is_form_success']
