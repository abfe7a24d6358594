import os
import logging
from dataclasses import asdict
from datetime import date, datetime

from flask import (Blueprint, Flask, Response, current_app, flash, jsonify, redirect,
                   render_template, request, send_file, send_from_directory, url_for)
from jinja2 import TemplateError

from excel_handler import ExcelHandler
from models import SchoolState, Student, default_class
from user_cookie import COOKIE_NAME, MalformedCookieError, UserData, decode_user_cookie, encode_user_cookie
from validation import INVALID_DATA_MESSAGE, VALID_GENDERS, compute_age, parse_birth_date, validate_user_data

# Set up logging
logging.basicConfig(level=logging.DEBUG)

DEFAULT_PORT = 8080
SEE_OTHER = 303
XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

bp = Blueprint('school', __name__)


def create_app(test_config=None):
    app = Flask(__name__)
    app.secret_key = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")

    # Configuration
    app.config['ROSTER_FILE'] = os.environ.get('ROSTER_FILE')
    if test_config:
        app.config.update(test_config)

    if 'SCHOOL_STATE' not in app.config:
        app.config['SCHOOL_STATE'] = SchoolState(load_class(app.config['ROSTER_FILE']))

    app.register_blueprint(bp)
    return app


def load_class(roster_file):
    school_class = default_class()
    if not roster_file:
        return school_class

    students = ExcelHandler().read_roster(roster_file)
    if not students:
        logging.warning(f"No students loaded from {roster_file}, using the default roster")
        return school_class

    logging.info(f"Loaded {len(students)} students from {roster_file}")
    school_class.students = students
    school_class.student_count = len(students)
    return school_class


def get_state() -> SchoolState:
    return current_app.config['SCHOOL_STATE']


def render_view(template_name, **context):
    """Render a template, answering 500 with the error message if it fails."""
    try:
        return render_template(template_name, **context)
    except TemplateError as e:
        logging.error(f"Error rendering {template_name}: {e}")
        return Response(str(e), status=500, mimetype='text/plain')


def read_user_cookie():
    """The last submission stored on the client, or None."""
    value = request.cookies.get(COOKIE_NAME)
    if value is None:
        return None
    try:
        return decode_user_cookie(value)
    except MalformedCookieError as e:
        logging.warning(str(e))
        return None


@bp.route('/')
def home():
    return send_from_directory(os.path.join(current_app.root_path, current_app.template_folder), 'home.html')


@bp.route('/promo')
def promo():
    school_class = get_state().snapshot()
    return render_view('promo.html', school_class=school_class)


@bp.route('/promo/data')
def promo_data():
    return jsonify(asdict(get_state().snapshot()))


@bp.route('/promo/export')
def promo_export():
    try:
        output = ExcelHandler().export_roster(get_state().snapshot())
        if output is not None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            return send_file(output, mimetype=XLSX_MIMETYPE, as_attachment=True,
                             download_name=f"promo_export_{timestamp}.xlsx")

        flash('Erreur lors de l\'export de la promo', 'error')
    except Exception as e:
        logging.error(f"Error exporting roster: {str(e)}")
        flash('Erreur lors de l\'export de la promo', 'error')

    return redirect(url_for('school.promo'), code=SEE_OTHER)


@bp.route('/change')
def change():
    count = get_state().increment_views()
    if count % 2 == 0:
        message = "Le nombre de vues est pair"
    else:
        message = "Le nombre de vues est impair"

    return render_view('change.html', count=count, message=message)


@bp.route('/user/form')
def user_form():
    user = read_user_cookie() or UserData()
    return render_view('user_form.html', user=user, genders=VALID_GENDERS)


@bp.route('/user/treatment', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
def user_treatment():
    if request.method != 'POST':
        return redirect(url_for('school.user_form'), code=SEE_OTHER)

    user = UserData.from_form(request.form)

    if not validate_user_data(user):
        logging.info(f"Rejected registration for {user.first_name!r} {user.last_name!r}")
        flash(INVALID_DATA_MESSAGE, 'error')
        return redirect(url_for('school.user_form'), code=SEE_OTHER)

    user.is_form_success = True
    user.age = compute_age(parse_birth_date(user.birth_date), date.today())

    previous = read_user_cookie()
    student = Student(first_name=user.first_name, last_name=user.last_name,
                      age=user.age, gender=user.gender)
    get_state().replace_or_append(
        student,
        previous.first_name if previous else None,
        previous.last_name if previous else None,
    )
    logging.info(f"Registered {user.first_name} {user.last_name} ({user.age})")

    response = redirect(url_for('school.user_display'), code=SEE_OTHER)
    response.set_cookie(COOKIE_NAME, encode_user_cookie(user), path='/')
    return response


@bp.route('/user/display')
def user_display():
    user = read_user_cookie()
    if user is None:
        return redirect(url_for('school.user_form'), code=SEE_OTHER)

    user.is_form_success = True
    return render_view('user_display.html', user=user)


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', DEFAULT_PORT)), debug=True, threaded=True)
