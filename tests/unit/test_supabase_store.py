"""
Unit tests for SupabaseStore against a mocked client.
"""

import pytest
from unittest.mock import MagicMock, Mock

from triage_handoff.database.base import DatabaseError
from triage_handoff.database.supabase import SupabaseStore
from triage_handoff.models.domain import Conversation, TriageRecord


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def supabase_store(client):
    return SupabaseStore(client)


def _returns(query, rows):
    query.execute.return_value = Mock(data=rows)


class TestConversations:
    @pytest.mark.asyncio
    async def test_missing_conversation_is_none(self, client, supabase_store):
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        _returns(query, [])

        assert await supabase_store.get_conversation("nope") is None
        client.table.assert_called_with("conversations")

    @pytest.mark.asyncio
    async def test_loads_stored_document(self, client, supabase_store, cardiologist):
        # Arrange
        stored = Conversation(pending_specialist=cardiologist, summary="tóm tắt")
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        _returns(query, [stored.model_dump(mode="json")])

        # Act
        loaded = await supabase_store.get_conversation(stored.id)

        # Assert
        assert loaded.id == stored.id
        assert loaded.pending_specialist == cardiologist
        assert loaded.summary == "tóm tắt"

    @pytest.mark.asyncio
    async def test_save_upserts_json_document(self, client, supabase_store):
        conversation = Conversation()
        conversation.append_message("user", "xin chào")
        _returns(client.table.return_value.upsert.return_value, [])

        await supabase_store.save_conversation(conversation)

        row = client.table.return_value.upsert.call_args.args[0]
        assert row["id"] == conversation.id
        assert row["messages"][0]["content"] == "xin chào"


class TestSpecialists:
    @pytest.mark.asyncio
    async def test_find_filters_on_specialty_and_availability(
        self, client, supabase_store, cardiologist
    ):
        # Arrange
        select = client.table.return_value.select.return_value
        query = select.ilike.return_value.eq.return_value.limit.return_value
        _returns(query, [cardiologist.model_dump(mode="json")])

        # Act
        found = await supabase_store.find_available_specialist("tim mạch")

        # Assert
        assert found == cardiologist
        select.ilike.assert_called_once_with("specialty", "tim mạch")
        select.ilike.return_value.eq.assert_called_once_with("available", True)

    @pytest.mark.asyncio
    async def test_no_match_is_none(self, client, supabase_store):
        select = client.table.return_value.select.return_value
        _returns(select.ilike.return_value.eq.return_value.limit.return_value, [])

        assert await supabase_store.find_available_specialist("Mắt") is None


class TestFailures:
    @pytest.mark.asyncio
    async def test_client_errors_become_database_error(self, client, supabase_store):
        client.table.return_value.insert.return_value.execute.side_effect = (
            ConnectionError("connection refused")
        )
        record = TriageRecord(symptoms="đau đầu", specialty="Thần kinh")

        with pytest.raises(DatabaseError):
            await supabase_store.add_triage_record(record)
