"""Test the /Tarefa HTTP endpoints end to end."""
import pytest

from verticals.tasks.repository import UpdateOutcome, get_task_repository

from factories import task_payload


async def _create(client, **kwargs) -> dict:
    resp = await client.post("/Tarefa", json=task_payload(**kwargs))
    assert resp.status_code == 201
    return resp.json()


@pytest.mark.asyncio
async def test_create_get_delete_lifecycle(client):
    resp = await client.post(
        "/Tarefa",
        json=task_payload(title="Buy milk", status="Pending", due_date="2024-05-01T00:00:00"),
    )
    assert resp.status_code == 201
    created = resp.json()
    task_id = created["id"]
    assert isinstance(task_id, int)
    assert resp.headers["location"].endswith(f"/Tarefa/{task_id}")

    resp = await client.get(f"/Tarefa/{task_id}")
    assert resp.status_code == 200
    assert resp.json() == {
        "id": task_id,
        "title": "Buy milk",
        "description": None,
        "due_date": "2024-05-01T00:00:00",
        "status": "Pending",
    }

    resp = await client.delete(f"/Tarefa/{task_id}")
    assert resp.status_code == 204
    assert resp.content == b""

    resp = await client.get(f"/Tarefa/{task_id}")
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("due_date", ["2024-05-01T23:30:00-05:00", "2024-05-02T04:30:00Z"])
async def test_create_normalizes_offset_due_date_to_utc(client, due_date):
    created = await _create(client, due_date=due_date)
    assert created["due_date"] == "2024-05-02T04:30:00"

    fetched = (await client.get(f"/Tarefa/{created['id']}")).json()
    assert fetched == created

    on_day = await client.get("/Tarefa/ObterPorData", params={"data": "2024-05-02"})
    assert [t["id"] for t in on_day.json()] == [created["id"]]


@pytest.mark.asyncio
async def test_create_ignores_supplied_id(client):
    created = await _create(client, id=12345)
    assert created["id"] != 12345
    assert (await client.get("/Tarefa/12345")).status_code == 404


@pytest.mark.asyncio
async def test_create_rejects_missing_title(client):
    body = task_payload()
    del body["title"]
    resp = await client.post("/Tarefa", json=body)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_create_rejects_status_code_number(client):
    resp = await client.post("/Tarefa", json=task_payload(status=1))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_status_serialized_by_name(client):
    created = await _create(client, status="Completed")
    assert created["status"] == "Completed"


@pytest.mark.asyncio
async def test_get_non_integer_id_is_bad_request(client):
    resp = await client.get("/Tarefa/abc")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_all(client):
    resp = await client.get("/Tarefa/ObterTodos")
    assert resp.status_code == 200
    assert resp.json() == []

    await _create(client, title="one")
    await _create(client, title="two")
    resp = await client.get("/Tarefa/ObterTodos")
    assert sorted(t["title"] for t in resp.json()) == ["one", "two"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"titulo": ""}, {"titulo": "   "}, {}])
async def test_search_by_title_rejects_blank(client, params):
    resp = await client.get("/Tarefa/ObterPorTitulo", params=params)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "title must not be empty"


@pytest.mark.asyncio
async def test_search_by_title(client):
    await _create(client, title="Buy milk")
    await _create(client, title="Buy bread")
    await _create(client, title="Call mom")
    resp = await client.get("/Tarefa/ObterPorTitulo", params={"titulo": "Buy"})
    assert resp.status_code == 200
    assert sorted(t["title"] for t in resp.json()) == ["Buy bread", "Buy milk"]


@pytest.mark.asyncio
async def test_search_by_date(client):
    await _create(client, title="morning", due_date="2024-05-01T08:00:00")
    await _create(client, title="evening", due_date="2024-05-01T21:45:00")
    await _create(client, title="tomorrow", due_date="2024-05-02T08:00:00")

    resp = await client.get("/Tarefa/ObterPorData", params={"data": "2024-05-01"})
    assert resp.status_code == 200
    assert sorted(t["title"] for t in resp.json()) == ["evening", "morning"]

    resp = await client.get("/Tarefa/ObterPorData", params={"data": "2030-01-01"})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_search_by_date_ignores_time_in_query(client):
    created = await _create(client, due_date="2024-05-01T09:30:00")
    resp = await client.get("/Tarefa/ObterPorData", params={"data": "2024-05-01T10:00:00"})
    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == [created["id"]]


@pytest.mark.asyncio
async def test_search_by_date_rejects_garbage(client):
    resp = await client.get("/Tarefa/ObterPorData", params={"data": "yesterday"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_filter_by_status(client):
    await _create(client, title="todo", status="Pending")
    await _create(client, title="done", status="Completed")
    resp = await client.get("/Tarefa/ObterPorStatus", params={"status": "Completed"})
    assert resp.status_code == 200
    assert [t["title"] for t in resp.json()] == ["done"]


@pytest.mark.asyncio
async def test_filter_by_status_rejects_unknown(client):
    resp = await client.get("/Tarefa/ObterPorStatus", params={"status": "Done"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_replaces_fields(client):
    created = await _create(client, title="Buy milk", description="2 litres")
    task_id = created["id"]

    body = task_payload(
        id=task_id, title="Buy oat milk", status="Completed", due_date="2024-06-02T10:00:00",
    )
    resp = await client.put(f"/Tarefa/{task_id}", json=body)
    assert resp.status_code == 204
    assert resp.content == b""

    resp = await client.get(f"/Tarefa/{task_id}")
    assert resp.json() == {
        "id": task_id,
        "title": "Buy oat milk",
        "description": None,
        "due_date": "2024-06-02T10:00:00",
        "status": "Completed",
    }


@pytest.mark.asyncio
async def test_update_id_mismatch_is_bad_request(client):
    created = await _create(client, title="original")
    task_id = created["id"]

    resp = await client.put(f"/Tarefa/{task_id}", json=task_payload(id=task_id + 1, title="changed"))
    assert resp.status_code == 400

    resp = await client.put(f"/Tarefa/{task_id}", json=task_payload(title="changed"))
    assert resp.status_code == 400

    assert (await client.get(f"/Tarefa/{task_id}")).json()["title"] == "original"


@pytest.mark.asyncio
async def test_update_missing_is_not_found(client):
    resp = await client.put("/Tarefa/99", json=task_payload(id=99))
    assert resp.status_code == 404
    assert (await client.get("/Tarefa/ObterTodos")).json() == []


@pytest.mark.asyncio
async def test_update_conflict_is_server_error(app, client):
    class ConflictingRepository:
        async def update(self, task_id, data):
            return UpdateOutcome.CONFLICT

    app.dependency_overrides[get_task_repository] = lambda: ConflictingRepository()
    resp = await client.put("/Tarefa/5", json=task_payload(id=5))
    assert resp.status_code == 500
    assert "conflict" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_delete_twice(client):
    created = await _create(client)
    assert (await client.delete(f"/Tarefa/{created['id']}")).status_code == 204
    assert (await client.delete(f"/Tarefa/{created['id']}")).status_code == 404
