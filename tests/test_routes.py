from app import db
from app.models import AnswerComment, Member, Question, SiteUser, TestResult
from tests.conftest import login


def test_index_redirects_to_login(client):
    response = client.get('/')
    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_wrong_password(client):
    response = login(client, password='wrong')
    assert response.status_code == 200
    assert 'Неверный пароль' in response.get_data(as_text=True)


def test_inactive_user_refused(client, member_user):
    member_user.is_active = False
    db.session.commit()
    login(client, 'member@example.com', 'secret')
    response = client.get('/history/')
    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_catalog_forbidden_for_users(member_client):
    assert member_client.get('/catalog/level/1').status_code == 403
    assert member_client.get('/admin/members').status_code == 403


def test_short_access_code(member_client):
    response = member_client.post('/attestation/level/1/code', data={'access_code': '12345'})
    assert response.status_code == 400


def test_branch_needs_access_code(member_client):
    response = member_client.get('/attestation/level/1/branch')
    assert response.status_code == 302
    assert '/attestation/level/1/code' in response.headers['Location']


def test_full_attestation_flow(member_client, level_one):
    response = member_client.post('/attestation/level/1/code', data={'access_code': '1234-5678-90'})
    assert response.status_code == 302

    response = member_client.post('/attestation/level/1/branch', data={'branch': 'karaoke'})
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/attestation/question')

    page = member_client.get('/attestation/question').get_data(as_text=True)
    assert 'Правила клуба' in page

    # Неполный балл без комментария не пропускает дальше
    response = member_client.post('/attestation/question', data={'score': '0.5', 'comment': ''})
    assert response.status_code == 400

    member_client.post('/attestation/question', data={'score': '0.5', 'comment': 'Забыл пункт'})
    member_client.post('/attestation/question', data={'score': '1', 'comment': ''})
    response = member_client.post('/attestation/question', data={'score': '2', 'comment': ''})
    assert response.status_code == 302
    assert '/attestation/result/' in response.headers['Location']

    result = TestResult.query.one()
    assert result.access_code == '1234567890'
    assert result.user_name == 'Иван'
    assert result.percentage_score == 88
    assert AnswerComment.query.count() == 1

    page = member_client.get(response.headers['Location']).get_data(as_text=True)
    assert 'Забыл пункт' in page


def test_general_branch_not_selectable(member_client, level_one):
    member_client.post('/attestation/level/1/code', data={'access_code': '1234567890'})
    response = member_client.post('/attestation/level/1/branch', data={'branch': 'general'})
    assert response.status_code == 400


def test_cancel_leaves_nothing(member_client, level_one):
    member_client.post('/attestation/level/1/code', data={'access_code': '1234567890'})
    member_client.post('/attestation/level/1/branch', data={'branch': 'lit_club'})
    member_client.post('/attestation/question', data={'score': '1'})
    member_client.post('/attestation/cancel')

    assert TestResult.query.count() == 0
    response = member_client.get('/attestation/question')
    assert response.status_code == 302


def test_admin_creates_and_deletes_question(admin_client, level_one):
    response = admin_client.post('/catalog/level/1/question/new', data={
        'question_text': 'Кинопоказ', 'branch': 'kinoshka', 'max_score': '1,5', 'order_index': '4'})
    assert response.status_code == 302
    question = Question.query.filter_by(question_text='Кинопоказ').one()
    assert question.max_score == 1.5

    response = admin_client.post('/catalog/level/1/question/new', data={
        'question_text': 'Плохой', 'branch': 'unknown', 'max_score': '1'})
    assert response.status_code == 400

    admin_client.post(f'/catalog/question/{question.id}/delete')
    assert Question.query.filter_by(id=question.id).first() is None


def test_admin_creates_member(admin_client):
    admin_client.post('/admin/members/create', data={
        'user_id': '42', 'nickname': 'Котик', 'level': '2', 'deadline': '2026-12-01', 'status': 'active'})
    member = Member.query.filter_by(user_id='42').one()
    assert member.level == 2

    admin_client.post('/admin/members/create', data={
        'user_id': 'abc', 'nickname': 'Ошибка', 'level': '1', 'deadline': '2026-12-01'})
    assert Member.query.count() == 1


def test_admin_cannot_delete_self(admin_client):
    admin = SiteUser.query.filter_by(role='admin').one()
    admin_client.post(f'/admin/site_users/{admin.id}/delete')
    assert db.session.get(SiteUser, admin.id) is not None


def test_admin_creates_site_user(admin_client):
    admin_client.post('/admin/site_users/create', data={
        'email': 'New@Example.com', 'name': 'Новый', 'password': 'pw', 'role': 'user'})
    user = SiteUser.query.filter_by(email='new@example.com').one()
    assert user.check_password('pw')


def test_site_user_session_fields(member_user):
    assert member_user.to_session() == {'id': member_user.id, 'email': 'member@example.com',
                                        'name': 'Иван', 'role': 'user'}


def test_long_comment_keeps_run(member_client, level_one, app):
    member_client.post('/attestation/level/1/code', data={'access_code': '1234567890'})
    member_client.post('/attestation/level/1/branch', data={'branch': 'karaoke'})

    too_long = 'ж' * (app.config['COMMENT_MAX_LENGTH'] + 1)
    response = member_client.post('/attestation/question', data={'score': '0.5', 'comment': too_long})
    assert response.status_code == 400
    assert 'Комментарий не должен быть длиннее' in response.get_data(as_text=True)

    # Прохождение и вход сохранились
    response = member_client.post('/attestation/question', data={'score': '0.5', 'comment': 'Коротко'})
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/attestation/question')
