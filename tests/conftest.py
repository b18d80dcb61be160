import pytest

from app import create_app, db
from app.models import Question, SiteUser, Test
from config import TestingConfig

ADMIN_EMAIL = TestingConfig.DEFAULT_ADMIN_EMAIL
ADMIN_PASSWORD = TestingConfig.DEFAULT_ADMIN_PASSWORD


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context(), app.test_request_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return client.post('/auth/login', data={'email': email, 'password': password})


@pytest.fixture
def admin_client(client):
    login(client)
    return client


@pytest.fixture
def member_user(app):
    user = SiteUser(email='member@example.com', name='Иван', role='user')
    user.set_password('secret')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def member_client(client, member_user):
    login(client, 'member@example.com', 'secret')
    return client


@pytest.fixture
def level_one(app):
    """Тест уровня 1: два общих вопроса и по одному на ветку"""
    test = Test(name='Тест уровня 1', level=1)
    db.session.add(test)
    db.session.flush()
    questions = [
        Question(test_id=test.id, question_text='Правила клуба', branch='general', max_score=1, order_index=1),
        Question(test_id=test.id, question_text='Этикет', branch='general', max_score=1, order_index=2),
        Question(test_id=test.id, question_text='Микрофон', branch='karaoke', max_score=2, order_index=3),
        Question(test_id=test.id, question_text='Стихи', branch='lit_club', max_score=1, order_index=3),
    ]
    db.session.add_all(questions)
    db.session.commit()
    return test
