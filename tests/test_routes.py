"""HTTP surface tests: status codes and response shapes through the ASGI app.

The app lifespan is not run by ASGITransport, so no real pool is created; the
module-level pool is the fake from conftest.
"""

from decimal import Decimal


async def test_health(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


async def test_query_returns_rows(client, conn):
    conn.respond("FROM enclosure ORDER BY e_id", [{"e_id": 1, "name": "Savanna"}])

    res = await client.get("/api/query", params={"v": "enclosures"})

    assert res.status_code == 200
    assert res.json() == [{"e_id": 1, "name": "Savanna"}]


async def test_query_unknown_name_is_400(client, pool):
    res = await client.get("/api/query", params={"v": "users"})
    assert res.status_code == 400
    assert res.json() == {"error": "Unknown query: users"}
    assert pool.touched == 0


async def test_query_without_name_is_400(client):
    res = await client.get("/api/query")
    assert res.status_code == 400


async def test_insert_returns_inserted_id(client, conn):
    conn.respond("INSERT INTO animal", 7)

    res = await client.post(
        "/api/insert/animal",
        json={"name": "Leo", "species_id": 3, "birth_date": "2020-01-01", "gender": "M"},
    )

    assert res.status_code == 200
    assert res.json() == {"inserted_id": 7}


async def test_insert_unknown_table_is_400(client, pool):
    res = await client.post("/api/insert/users", json={"email": "x@example.com"})
    assert res.status_code == 400
    assert res.json() == {"error": "Unknown table: users"}
    assert pool.checkouts == 0


async def test_insert_store_rejection_is_500_with_message(client, pool, conn):
    conn.fail_on("INSERT INTO animal", 'new row for relation "animal" violates check constraint')

    res = await client.post("/api/insert/animal", json={"name": "Leo", "gender": "X"})

    assert res.status_code == 500
    assert "violates check constraint" in res.json()["error"]
    assert pool.releases == 1


async def test_delete_reports_outcome(client, conn):
    conn.respond("DELETE FROM", "DELETE 0")

    res = await client.delete("/api/delete/ticket/55")

    assert res.status_code == 200
    assert res.json() == {"deleted": False, "id": 55, "resource": "ticket"}


async def test_delete_unknown_table_is_400(client, pool):
    res = await client.delete("/api/delete/users/1")
    assert res.status_code == 400
    assert pool.touched == 0


async def test_delete_unknown_table_with_text_id_is_400(client, pool):
    res = await client.delete("/api/delete/dragons/abc")
    assert res.status_code == 400
    assert res.json() == {"error": "Unknown table: dragons"}
    assert pool.touched == 0


async def test_delete_non_integer_id_is_400(client, pool):
    res = await client.delete("/api/delete/animal/abc")
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid id: abc"}
    assert pool.touched == 0


async def test_insert_array_body_for_unknown_table_is_400(client, pool):
    res = await client.post("/api/insert/dragons", json=[{"name": "Smaug"}])
    assert res.status_code == 400
    assert res.json() == {"error": "Unknown table: dragons"}
    assert pool.touched == 0


async def test_insert_array_body_for_known_table_is_400(client, pool):
    res = await client.post("/api/insert/animal", json=[{"name": "Leo"}])
    assert res.status_code == 400
    assert "expects a JSON object" in res.json()["error"]
    assert pool.touched == 0


async def test_schedule_event_missing_title_is_400(client, pool):
    res = await client.post("/api/schedule_event", json={"e_date": "2026-01-01", "e_id": 1})

    assert res.status_code == 400
    body = res.json()
    assert set(body) == {"error"}
    assert "title" in body["error"]
    assert pool.touched == 0


async def test_malformed_path_id_is_400_with_error_body(client):
    res = await client.get("/api/animal_age/leo")
    assert res.status_code == 400
    assert "a_id" in res.json()["error"]


async def test_schedule_event(client, conn):
    conn.respond("current_setting", "42")

    res = await client.post(
        "/api/schedule_event",
        json={"title": "Feeding show", "e_date": "2026-06-01", "e_id": 2, "capacity": 50, "infra_ids": [5, 6]},
    )

    assert res.status_code == 200
    assert res.json() == {"event_id": 42, "assigned_infra": [5, 6]}


async def test_schedule_event_failure_is_500(client, conn):
    conn.fail_on("CALL schedule_event", "capacity exceeds enclosure")

    res = await client.post(
        "/api/schedule_event",
        json={"title": "Feeding show", "e_date": "2026-06-01", "e_id": 2, "capacity": 5000},
    )

    assert res.status_code == 500
    assert res.json() == {"error": "capacity exceeds enclosure"}


async def test_assign_employee(client, conn):
    conn.respond("current_setting", "1")

    res = await client.post("/api/assign_employee", json={"emp_id": 4, "e_id": 2, "role_desc": "keeper"})

    assert res.status_code == 200
    assert res.json() == {"success": 1}


async def test_feed_log_defaults(client, conn):
    conn.respond("INSERT INTO feed_log", {"fl_id": 3})

    res = await client.post("/api/feed_log", json={"a_id": 1, "f_id": 2, "amount": "", "unit": ""})

    assert res.status_code == 200
    assert res.json() == {"insertId": 3}
    [(_, args)] = conn.matching("INSERT INTO feed_log")
    assert args == (1, 2, Decimal(0), "kg", None)


async def test_feed_log_keeps_supplied_values(client, conn):
    conn.respond("INSERT INTO feed_log", {"fl_id": 4})

    await client.post(
        "/api/feed_log",
        json={"a_id": 1, "f_id": 2, "amount": 2.5, "unit": "lb", "fed_by": 9},
    )

    [(_, args)] = conn.matching("INSERT INTO feed_log")
    assert args == (1, 2, Decimal("2.5"), "lb", 9)


async def test_scalar_function_endpoints(client, conn):
    conn.respond("animal_age(", {"age": 6})
    conn.respond("enclosure_remaining_capacity(", {"remaining": 2})

    age = await client.get("/api/animal_age/1")
    remaining = await client.get("/api/enclosure_remaining/3")

    assert age.json() == {"age": 6}
    assert remaining.json() == {"remaining": 2}
    assert conn.matching("animal_age(")[0][1] == (1,)


async def test_notifications_are_limited(client, conn):
    conn.respond("FROM notifications", [{"n_id": 1, "level": "INFO", "message": "hi"}])

    res = await client.get("/api/notifications")

    assert res.status_code == 200
    assert res.json()[0]["message"] == "hi"
    [(statement, args)] = conn.matching("FROM notifications")
    assert statement.endswith("LIMIT $1")
    assert args == (50,)
