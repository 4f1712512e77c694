from datetime import datetime, timedelta
import pytest
from sqlalchemy.exc import IntegrityError
from app.core.exceptions import ConflictError, ValidationError
from app.models.board import Board, BoardList
from app.models.card import Card, CardTimeEntry
from app.services.card_service import card_service, round_minutes


@pytest.fixture
def board_list(db, ceo):
    board = Board(name="Website", created_by_id=ceo.id)
    board_list = BoardList(title="Doing", position=0)
    board.lists.append(board_list)
    db.add(board)
    db.commit()
    db.refresh(board_list)
    return board_list


def make_card(db, board_list, assignee=None, title="Landing page", created_at=None, status="Pending"):
    card = Card(
        title=title,
        list_id=board_list.id,
        assigned_to_id=assignee.id if assignee else None,
        status=status,
        created_at=created_at or datetime.utcnow()
    )
    db.add(card)
    db.commit()
    db.refresh(card)
    return card


def test_round_minutes_rounds_halves_up():
    assert round_minutes(150) == 3
    assert round_minutes(149) == 2
    assert round_minutes(90) == 2
    assert round_minutes(29) == 0


def test_timer_start_stop(db, board_list, developer):
    card = make_card(db, board_list, developer)
    start = datetime(2026, 10, 19, 10, 0, 0)

    card_service.start_timer(db, card.id, "first pass", now=start)
    card, duration = card_service.stop_timer(db, card.id, now=start + timedelta(minutes=2, seconds=30))

    assert duration == 3
    assert card.total_minutes == 3
    assert card.start_time == start
    assert card.end_time == start + timedelta(minutes=2, seconds=30)
    assert card.time_entries[0].note == "first pass"
    assert card.open_time_entry is None


def test_total_minutes_is_sum_of_entries(db, board_list, developer):
    card = make_card(db, board_list, developer)
    start = datetime(2026, 10, 19, 9)

    for offset, seconds in ((0, 610), (60, 1790), (120, 29)):
        begin = start + timedelta(minutes=offset)
        card_service.start_timer(db, card.id, now=begin)
        card_service.stop_timer(db, card.id, now=begin + timedelta(seconds=seconds))

    db.refresh(card)
    assert [entry.duration for entry in card.time_entries] == [10, 30, 0]
    assert card.total_minutes == 40
    # start_time keeps the first start
    assert card.start_time == start


def test_double_start_conflicts(db, board_list):
    card = make_card(db, board_list)
    card_service.start_timer(db, card.id, now=datetime(2026, 10, 19, 9))
    with pytest.raises(ConflictError):
        card_service.start_timer(db, card.id, now=datetime(2026, 10, 19, 9, 5))
    assert db.query(CardTimeEntry).filter(CardTimeEntry.card_id == card.id).count() == 1


def test_stop_without_timer(db, board_list):
    card = make_card(db, board_list)
    with pytest.raises(ValidationError):
        card_service.stop_timer(db, card.id)


def test_timer_routes(client, dev_headers, db, board_list, developer):
    card = make_card(db, board_list, developer)

    response = client.post(f"/api/cards/{card.id}/timer/start", json={"note": "api"}, headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["card"]["time_entries"][0]["end_time"] is None

    response = client.post(f"/api/cards/{card.id}/timer/start", headers=dev_headers)
    assert response.status_code == 400

    response = client.post(f"/api/cards/{card.id}/timer/stop", headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["duration"] == 0

    response = client.post(f"/api/cards/{card.id}/timer/stop", headers=dev_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "No active timer found"


def test_list_incomplete_and_acknowledge(db, board_list, developer, designer):
    now = datetime(2026, 10, 19, 10)
    yesterday = now - timedelta(days=1)
    stale = make_card(db, board_list, developer, "Stale", created_at=yesterday)
    make_card(db, board_list, developer, "Done", created_at=yesterday, status="Completed")
    make_card(db, board_list, developer, "Fresh", created_at=now)
    foreign = make_card(db, board_list, designer, "Theirs", created_at=yesterday)

    cards = card_service.list_incomplete(db, developer.id, now=now)
    assert [card.title for card in cards] == ["Stale"]

    modified = card_service.acknowledge(db, developer.id, [stale.id, foreign.id], now=now)
    assert modified == 1

    db.expire_all()
    assert stale.acknowledged_by_employee is True
    assert stale.is_carried_over is True
    assert stale.carried_from_date == now
    assert foreign.acknowledged_by_employee is False
    assert card_service.list_incomplete(db, developer.id, now=now) == []


def test_acknowledge_requires_ids(client, dev_headers):
    response = client.post("/api/cards/progress/acknowledge", json={"card_ids": []}, headers=dev_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Card IDs array required"


def test_card_crud_logs_activities(client, dev_headers, db, board_list, developer):
    response = client.post(
        "/api/cards/",
        json={"list_id": board_list.id, "title": "Hero banner", "assigned_to_id": developer.id},
        headers=dev_headers
    )
    assert response.status_code == 201
    card_id = response.json()["card"]["id"]

    response = client.put(f"/api/cards/{card_id}", json={"status": "In Progress"}, headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["card"]["status"] == "In Progress"

    response = client.put(f"/api/cards/{card_id}", json={"description": "Bigger"}, headers=dev_headers)
    assert response.status_code == 200

    cards = client.get(f"/api/cards/{board_list.id}", headers=dev_headers).json()
    assert cards["count"] == 1

    assert client.delete(f"/api/cards/{card_id}", headers=dev_headers).status_code == 200

    actions = [a["action"] for a in client.get("/api/activities/", headers=dev_headers).json()["activities"]]
    assert actions == ["deleted_card", "updated_card", "changed_card_status", "created_card"]


def test_only_assignee_or_ceo_can_edit(client, db, board_list, designer, dev_headers, ceo_headers):
    card = make_card(db, board_list, designer)

    response = client.put(f"/api/cards/{card.id}", json={"title": "Hijack"}, headers=dev_headers)
    assert response.status_code == 403

    response = client.put(f"/api/cards/{card.id}", json={"title": "Approved"}, headers=ceo_headers)
    assert response.status_code == 200


def test_work_summary(db, board_list, developer):
    now = datetime(2026, 10, 19, 12)
    make_card(db, board_list, developer, "A", created_at=now - timedelta(days=2), status="Completed")
    card = make_card(db, board_list, developer, "B", created_at=now - timedelta(days=3), status="In Progress")
    make_card(db, board_list, developer, "Old", created_at=now - timedelta(days=20))
    card.total_minutes = 125
    db.commit()

    summary = card_service.work_summary(db, developer.id, "weekly", now=now)
    assert summary["summary"]["total_tasks"] == 2
    assert summary["summary"]["completion_rate"] == 50
    assert summary["summary"]["total_time_spent"] == {"hours": 2, "minutes": 5, "total_minutes": 125}
    assert summary["tasks_by_board"]["Website"]["in_progress"] == 1


def test_work_summary_rejects_unknown_period(client, dev_headers, developer):
    response = client.get(f"/api/cards/analytics/{developer.id}/hourly", headers=dev_headers)
    assert response.status_code == 400


def test_open_entry_index_rejects_second_running_timer(db, board_list):
    card = make_card(db, board_list)
    db.add(CardTimeEntry(card_id=card.id, start_time=datetime(2026, 10, 19, 9)))
    db.commit()

    db.add(CardTimeEntry(card_id=card.id, start_time=datetime(2026, 10, 19, 9, 5)))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    # A closed entry alongside the open one is fine
    db.add(CardTimeEntry(card_id=card.id, start_time=datetime(2026, 10, 19, 8), end_time=datetime(2026, 10, 19, 8, 30)))
    db.commit()


def test_racing_timer_start_conflicts(db, board_list, monkeypatch):
    card = make_card(db, board_list)
    card_service.start_timer(db, card.id, now=datetime(2026, 10, 19, 9))

    # The other request's entry is not visible to this one's check
    monkeypatch.setattr(Card, "open_time_entry", property(lambda self: None))
    with pytest.raises(ConflictError):
        card_service.start_timer(db, card.id, now=datetime(2026, 10, 19, 9, 1))

    monkeypatch.undo()
    assert db.query(CardTimeEntry).filter(CardTimeEntry.card_id == card.id).count() == 1


@pytest.mark.parametrize("field", ["title", "list_id", "position", "status"])
def test_update_rejects_null_for_required_fields(client, dev_headers, db, board_list, developer, field):
    card = make_card(db, board_list, developer)

    response = client.put(f"/api/cards/{card.id}", json={field: None}, headers=dev_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == f"{field} cannot be null"

    db.expire_all()
    assert db.get(Card, card.id).title == "Landing page"


def test_update_clears_optional_fields(client, dev_headers, db, board_list, developer):
    card = make_card(db, board_list, developer)

    response = client.put(f"/api/cards/{card.id}", json={"description": None, "due_date": None}, headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["card"]["description"] is None


def test_update_rejects_unknown_assignee(client, dev_headers, db, board_list, developer):
    card = make_card(db, board_list, developer)

    response = client.put(f"/api/cards/{card.id}", json={"assigned_to_id": 999}, headers=dev_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Assigned user not found"

    db.expire_all()
    assert db.get(Card, card.id).assigned_to_id == developer.id


def test_update_rejects_unknown_list(client, dev_headers, db, board_list, developer):
    card = make_card(db, board_list, developer)
    response = client.put(f"/api/cards/{card.id}", json={"list_id": 999}, headers=dev_headers)
    assert response.status_code == 404
