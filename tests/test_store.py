"""
Tests for the query builder and both store backends.
"""

from __future__ import annotations

from chatwidget.store import ErrorKind, MemoryStore


async def test_insert_fills_defaults(store) -> None:
    response = await store.table("keyword_responses").insert(
        {"user_id": "u1", "response": "Hello!"}
    ).select().single().execute()

    assert response.ok
    row = response.data
    assert row["id"]
    assert row["priority"] == 0
    assert row["is_active"] is True
    assert row["keywords"] == []
    assert row["created_at"] is not None


async def test_single_on_no_rows_is_not_found(store) -> None:
    response = await store.table("widget_settings").select("*").eq("user_id", "nobody").single().execute()

    assert not response.ok
    assert response.not_found
    assert response.error.kind is ErrorKind.NOT_FOUND


async def test_single_on_many_rows_is_an_error(store) -> None:
    for text in ("a", "b"):
        await store.table("keyword_responses").insert({"user_id": "u1", "response": text}).execute()

    response = await store.table("keyword_responses").select("*").eq("user_id", "u1").single().execute()

    assert response.error.kind is ErrorKind.MULTIPLE_ROWS
    assert not response.not_found


async def test_unknown_table(store) -> None:
    response = await store.table("visitors").select("*").execute()
    assert response.error.kind is ErrorKind.UNDEFINED_TABLE


async def test_unknown_column_in_filter(store) -> None:
    response = await store.table("messages").select("*").eq("session", "x").execute()
    assert response.error.kind is ErrorKind.UNDEFINED_COLUMN


async def test_unknown_column_in_payload(store) -> None:
    response = await store.table("users").insert({"id": "u1", "nickname": "x"}).execute()
    assert response.error.kind is ErrorKind.UNDEFINED_COLUMN


async def test_unique_violation(store) -> None:
    first = await store.table("widget_settings").insert({"user_id": "u1"}).execute()
    second = await store.table("widget_settings").insert({"user_id": "u1"}).execute()

    assert first.ok
    assert second.error.kind is ErrorKind.CONSTRAINT_VIOLATION


async def test_not_null_violation(store) -> None:
    response = await store.table("keyword_responses").insert({"response": "orphan"}).execute()
    assert response.error.kind is ErrorKind.CONSTRAINT_VIOLATION


async def test_in_filter_order_and_projection(store) -> None:
    for sid, status in (("s1", "active"), ("s2", "closed"), ("s3", "agent_assigned")):
        await store.table("chat_sessions").insert({"id": sid, "user_id": "u1", "status": status}).execute()

    response = await (
        store.table("chat_sessions")
        .select("id, status")
        .in_("status", ["active", "agent_assigned"])
        .order("id", desc=True)
        .execute()
    )

    assert response.data == [
        {"id": "s3", "status": "agent_assigned"},
        {"id": "s1", "status": "active"},
    ]


async def test_nulls_sort_last_in_both_directions(store) -> None:
    for rid, priority in (("a", 1), ("b", None), ("c", 3)):
        await store.table("keyword_responses").insert(
            {"id": rid, "user_id": "u1", "response": rid, "priority": priority}
        ).execute()

    desc = await store.table("keyword_responses").select("id").order("priority", desc=True).execute()
    asc = await store.table("keyword_responses").select("id").order("priority").execute()

    assert [row["id"] for row in desc.data] == ["c", "a", "b"]
    assert [row["id"] for row in asc.data] == ["a", "c", "b"]


async def test_update_returns_changed_rows(store) -> None:
    await store.table("chat_sessions").insert({"id": "s1", "user_id": "u1"}).execute()

    response = await store.table("chat_sessions").update({"status": "closed"}).eq("id", "s1").select().single().execute()
    missing = await store.table("chat_sessions").update({"status": "closed"}).eq("id", "nope").select().single().execute()

    assert response.data["status"] == "closed"
    assert response.data["user_id"] == "u1"
    assert missing.not_found


async def test_delete_removes_rows(store) -> None:
    await store.table("users").insert({"id": "u1"}).execute()
    await store.table("users").insert({"id": "u2"}).execute()

    deleted = await store.table("users").delete().eq("id", "u1").select("id").execute()
    remaining = await store.table("users").select("id").execute()

    assert deleted.data == [{"id": "u1"}]
    assert remaining.data == [{"id": "u2"}]


async def test_memory_store_sort_is_stable(memory_store: MemoryStore) -> None:
    for rid, priority in (("k1", 5), ("k2", 1), ("k3", 5), ("k4", 3)):
        await memory_store.table("keyword_responses").insert(
            {"id": rid, "user_id": "u1", "response": rid, "priority": priority}
        ).execute()

    response = await memory_store.table("keyword_responses").select("id").order("priority", desc=True).execute()

    assert [row["id"] for row in response.data] == ["k1", "k3", "k4", "k2"]


async def test_memory_store_returns_copies(memory_store: MemoryStore) -> None:
    await memory_store.table("keyword_responses").insert(
        {"id": "k1", "user_id": "u1", "response": "r", "keywords": ["price"]}
    ).execute()

    response = await memory_store.table("keyword_responses").select("*").execute()
    response.data[0]["keywords"].append("cost")

    assert memory_store.rows("keyword_responses")[0]["keywords"] == ["price"]
