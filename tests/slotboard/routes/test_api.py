from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from slotboard.main import create_app
from slotboard.routes import calendar_routes
from slotboard.services.members import DEFAULT_MEMBERS
from slotboard.storage.file import build_file_storage
from slotboard.storage.memory import build_memory_storage

ANDROID_USER_AGENT = (
    'Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/124.0.0.0 Mobile Safari/537.36'
)


@pytest.fixture
def client():
    app = create_app(storage=build_memory_storage(), seed_members=True)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def member(client: TestClient) -> dict:
    return client.get('/api/members').json()[1]


def test_root_reports_status(client: TestClient) -> None:
    response = client.get('/')

    assert response.status_code == 200
    assert response.json() == {'status': 'Slotboard API Running'}


def test_members_are_seeded_on_startup(client: TestClient) -> None:
    members = client.get('/api/members').json()

    assert [entry['name'] for entry in members] == [name for name, _, _ in DEFAULT_MEMBERS]
    assert set(members[0]) == {'id', 'name', 'initials', 'avatarColor'}


def test_book_list_and_cancel_flow(client: TestClient, member: dict) -> None:
    payload = {'memberId': member['id'], 'memberName': member['name'], 'date': '2025-08-18'}

    created = client.post('/api/bookings', json=payload, headers={'User-Agent': ANDROID_USER_AGENT})

    assert created.status_code == 201
    body = created.json()
    assert set(body) == {'id', 'memberId', 'memberName', 'date', 'createdAt'}
    assert body['date'] == '2025-08-18'

    assert [entry['id'] for entry in client.get('/api/bookings/2025-08-18').json()] == [body['id']]
    assert [entry['id'] for entry in client.get(f"/api/members/{member['id']}/bookings").json()] == [body['id']]

    cancelled = client.delete(f"/api/bookings/{member['id']}/2025-08-18")

    assert cancelled.status_code == 200
    assert cancelled.json() == {'message': 'Booking cancelled successfully'}
    assert client.get('/api/bookings').json() == []

    activities = client.get('/api/activities/2025-08-18').json()
    assert [entry['action'] for entry in activities] == ['cancelled a slot for', 'booked a slot for']
    assert activities[1]['deviceInfo'] == 'Android Device (Android 14) - Chrome'
    assert activities[0]['memberName'] == member['name']


def test_errors_use_message_shape(client: TestClient, member: dict) -> None:
    weekend = client.post(
        '/api/bookings',
        json={'memberId': member['id'], 'memberName': member['name'], 'date': '2025-08-23'},
    )
    missing = client.delete(f"/api/bookings/{member['id']}/2025-08-18")
    bad_path = client.get('/api/bookings/2025-13-01')

    assert weekend.status_code == 400
    assert weekend.json() == {'message': 'Bookings are only allowed on weekdays (Monday-Friday)'}
    assert missing.status_code == 404
    assert missing.json() == {'message': 'Booking not found'}
    assert bad_path.status_code == 400
    assert bad_path.json() == {'message': '2025-13-01 is not a valid calendar date'}


def test_invalid_body_returns_400(client: TestClient) -> None:
    response = client.post('/api/bookings', json={'memberId': 'm1', 'date': '18/08/2025'})

    assert response.status_code == 400
    body = response.json()
    assert body['message'] == 'Invalid request data'
    assert {error['field'] for error in body['errors']} == {'memberName', 'date'}


def test_capacity_is_enforced_over_http(client: TestClient) -> None:
    members = client.get('/api/members').json()

    statuses = [
        client.post(
            '/api/bookings',
            json={'memberId': entry['id'], 'memberName': entry['name'], 'date': '2025-08-19'},
        ).status_code
        for entry in members[:7]
    ]

    assert statuses == [201] * 6 + [400]
    assert len(client.get('/api/bookings/2025-08-19').json()) == 6


def test_comments_round_trip(client: TestClient, member: dict) -> None:
    created = client.post(
        '/api/comments',
        json={'memberId': member['id'], 'memberName': member['name'], 'date': '2025-08-18', 'comment': ' Hi all '},
    )

    assert created.status_code == 201
    assert created.json()['comment'] == 'Hi all'
    assert [entry['comment'] for entry in client.get('/api/comments/2025-08-18').json()] == ['Hi all']
    assert client.get('/api/comments/2025-08-19').json() == []
    assert len(client.get('/api/comments').json()) == 1


def test_calendar_and_participation_endpoints(client: TestClient, member: dict, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(calendar_routes, 'local_now', lambda: datetime(2025, 8, 20, 9, 0))
    client.post('/api/bookings', json={'memberId': member['id'], 'memberName': member['name'], 'date': '2025-08-21'})

    calendar = client.get('/api/calendar').json()
    participation = client.get('/api/participation', params={'year': 2025, 'month': 8, 'sortBy': 'totalBookings'})

    assert [day['date'] for day in calendar['week1']] == [f'2025-08-{day}' for day in range(18, 23)]
    assert calendar['week1'][2]['isBookable'] is False
    assert calendar['week1'][3]['bookedCount'] == 1
    assert calendar['week1'][3]['capacity'] == 6
    assert participation.status_code == 200
    top = participation.json()[0]
    assert top['member']['id'] == member['id']
    assert top['totalBookings'] == 1
    assert top['participationRate'] == 5
    assert top['status'] == 'Low'


def test_participation_rejects_out_of_range_month(client: TestClient) -> None:
    response = client.get('/api/participation', params={'year': 2025, 'month': 13})

    assert response.status_code == 400


def test_file_backend_with_unreadable_data_refuses_writes(tmp_path) -> None:
    data_file = tmp_path / 'slotboard.json'
    data_file.write_text('{"comments": [', encoding='utf-8')
    app = create_app(storage=build_file_storage(tmp_path), seed_members=True)

    with TestClient(app) as client:
        response = client.post(
            '/api/comments',
            json={'memberId': 'm1', 'memberName': 'Gagan', 'date': '2025-08-18', 'comment': 'x'},
        )

    assert response.status_code == 503
    assert response.json() == {'message': 'Data files are unavailable.'}
    assert data_file.read_text(encoding='utf-8') == '{"comments": ['
