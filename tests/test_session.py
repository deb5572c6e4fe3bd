import asyncio


def test_late_response_does_not_overwrite_newer_one():
    from genelinker.session import Workspace

    async def scenario():
        ws = Workspace()
        gate = asyncio.Event()

        async def run(value, wait=None):
            t = ws.begin("answer")
            if wait is not None:
                await wait.wait()
            return ws.commit(t, value)

        first = asyncio.create_task(run("old", gate))
        await asyncio.sleep(0)
        second = await run("new")
        gate.set()
        return ws, await first, second

    ws, first_ok, second_ok = asyncio.run(scenario())
    assert second_ok and not first_ok
    assert ws.get("answer") == "new"


class _GatedClient:
    """Stands in for CompletionClient: answers in reverse order of arrival."""

    def __init__(self):
        self.gates = []

    async def complete(self, system, user, temperature=0.3, max_tokens=800):
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return f"answer to {user}"


def test_stale_guard_with_real_query_path():
    from genelinker.llm.qa_llm import ask_research_question
    from genelinker.session import Workspace

    async def scenario():
        ws = Workspace()
        client = _GatedClient()

        async def ask(q):
            t = ws.begin("answer")
            out = await ask_research_question(q, client)
            return ws.commit(t, out)

        a = asyncio.create_task(ask("first"))
        b = asyncio.create_task(ask("second"))
        while len(client.gates) < 2:
            await asyncio.sleep(0)
        client.gates[1].set()
        b_ok = await b
        client.gates[0].set()
        a_ok = await a
        return ws, a_ok, b_ok

    ws, a_ok, b_ok = asyncio.run(scenario())
    assert b_ok and not a_ok
    assert ws.get("answer").value.answer == "answer to second"


def test_channels_are_independent():
    from genelinker.session import Workspace
    ws = Workspace()
    a = ws.begin("answer")
    s = ws.begin("search")
    assert ws.commit(a, 1) and ws.commit(s, 2)
    ws.clear("answer")
    assert ws.get("answer") is None and ws.get("search") == 2


def test_new_search_drops_an_analysis_still_in_flight(tmp_path):
    import json
    from genelinker.config import ClientConfig
    from genelinker.prefs import Preferences
    from genelinker.server.research_routes import papers_analyze, papers_search
    from genelinker.server.services import Services

    async def scenario():
        client = _GatedClient()
        svc = Services(llm=client, search_config=ClientConfig(endpoint="http://core.test/v3"),
                       prefs=Preferences(tmp_path / "prefs.json"))
        await papers_search({"q": "old topic"}, svc)
        pending = asyncio.create_task(papers_analyze({"paper_id": "core_001"}, svc))
        while not client.gates:
            await asyncio.sleep(0)
        await papers_search({"q": "new topic"}, svc)
        client.gates[0].set()
        resp = await pending
        return svc.workspace, json.loads(resp.body)

    ws, body = asyncio.run(scenario())
    assert body["stale"] is True
    assert ws.get("analysis") is None
    assert ws.get("paper") is None
    assert ws.get("search").value.papers


def test_invalidate_makes_issued_tickets_stale():
    from genelinker.session import Workspace
    ws = Workspace()
    t = ws.begin("analysis")
    ws.put("analysis", "old")
    ws.invalidate("analysis")
    assert ws.get("analysis") is None
    assert not ws.commit(t, "late")
    assert ws.get("analysis") is None
