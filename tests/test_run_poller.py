"""Tests for the run polling state machine."""

import pytest

from services.conversation.errors import PollTimeout, RunFailed
from services.conversation.run_poller import RunPoller, RunState, classify_status


class TestClassifyStatus:
    @pytest.mark.parametrize("status", ["queued", "in_progress", "cancelling", "IN_PROGRESS"])
    def test_pending_statuses(self, status):
        assert classify_status(status) is RunState.PENDING

    def test_terminal_statuses(self):
        assert classify_status("completed") is RunState.COMPLETED
        assert classify_status("failed") is RunState.FAILED

    @pytest.mark.parametrize("status", ["cancelled", "expired", "incomplete", "requires_action", "something_new"])
    def test_other_statuses_stop_polling(self, status):
        assert classify_status(status) is RunState.STOPPED


class TestRunPoller:
    @pytest.mark.asyncio
    async def test_polls_until_completed(self, client, fakes):
        client.beta.threads.runs.retrieve.side_effect = [
            fakes.run("in_progress"),
            fakes.run("in_progress"),
            fakes.run("in_progress"),
            fakes.run("completed"),
        ]
        poller = RunPoller(client, interval=0)

        run = await poller.wait("thread_0", fakes.run("queued"))

        assert run.status == "completed"
        assert client.beta.threads.runs.retrieve.await_count == 4
        client.beta.threads.runs.retrieve.assert_awaited_with("run_1", thread_id="thread_0")

    @pytest.mark.asyncio
    async def test_already_completed_run_is_not_polled(self, client, fakes):
        poller = RunPoller(client, interval=0)

        await poller.wait("thread_0", fakes.run("completed"))

        client.beta.threads.runs.retrieve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_run_carries_service_message(self, client, fakes):
        client.beta.threads.runs.retrieve.side_effect = [fakes.run("failed", error="rate limited")]
        poller = RunPoller(client, interval=0)

        with pytest.raises(RunFailed) as excinfo:
            await poller.wait("thread_0", fakes.run("queued"))

        assert excinfo.value.reason == "rate limited"
        assert excinfo.value.status == "failed"
        assert excinfo.value.run_id == "run_1"

    @pytest.mark.asyncio
    async def test_failed_run_without_error_is_unknown(self, client, fakes):
        client.beta.threads.runs.retrieve.side_effect = [fakes.run("failed")]
        poller = RunPoller(client, interval=0)

        with pytest.raises(RunFailed) as excinfo:
            await poller.wait("thread_0", fakes.run("in_progress"))

        assert excinfo.value.reason == "unknown"

    @pytest.mark.asyncio
    async def test_expired_run_is_reported_with_its_status(self, client, fakes):
        client.beta.threads.runs.retrieve.side_effect = [fakes.run("expired")]
        poller = RunPoller(client, interval=0)

        with pytest.raises(RunFailed) as excinfo:
            await poller.wait("thread_0", fakes.run("queued"))

        assert excinfo.value.status == "expired"
        assert "expired" in excinfo.value.reason

    @pytest.mark.asyncio
    async def test_timeout_is_distinct_from_failure(self, client, fakes):
        poller = RunPoller(client, interval=0, timeout=0.0)

        with pytest.raises(PollTimeout) as excinfo:
            await poller.wait("thread_0", fakes.run("queued"))

        assert not isinstance(excinfo.value, RunFailed)
        assert excinfo.value.run_id == "run_1"
        assert excinfo.value.status == "queued"

    @pytest.mark.asyncio
    async def test_retrieval_errors_propagate(self, client, fakes):
        boom = ConnectionError("network down")
        client.beta.threads.runs.retrieve.side_effect = [fakes.run("in_progress"), boom]
        poller = RunPoller(client, interval=0)

        with pytest.raises(ConnectionError) as excinfo:
            await poller.wait("thread_0", fakes.run("queued"))

        assert excinfo.value is boom

    def test_negative_interval_is_rejected(self, client):
        with pytest.raises(ValueError):
            RunPoller(client, interval=-1)
