import asyncio

from fastapi.testclient import TestClient

from test_api import question_body

from fakeso.main import app
from fakeso.schemas.question import VoteResult
from fakeso.services.events import ConnectionManager, Event, encode_event


class FakeSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def accept(self):
        pass

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(message)


def test_encode_event_uses_camel_case():
    frame = encode_event(Event.VOTE_UPDATE, VoteResult(msg="ok", up_votes=["dave"], down_votes=[]))
    assert frame == {"event": "voteUpdate", "data": {"msg": "ok", "upVotes": ["dave"], "downVotes": []}}


def test_broadcast_drops_failing_socket():
    connections = ConnectionManager()
    good, bad = FakeSocket(), FakeSocket(fail=True)

    async def _run():
        await connections.connect(good)
        await connections.connect(bad)
        await connections.broadcast({"event": "questionUpdate", "data": {}})

    asyncio.run(_run())

    assert connections.active_connections == [good]
    assert good.sent == [{"event": "questionUpdate", "data": {}}]


def test_socket_receives_question_update():
    with TestClient(app) as client:
        with client.websocket_connect("/socket") as ws:
            created = client.post("/question/addQuestion", json=question_body()).json()
            frame = ws.receive_json()

    assert frame["event"] == "questionUpdate"
    assert frame["data"]["removed"] is False
    quest = frame["data"]["quest"]
    assert quest["id"] == created["id"]
    assert quest["askedBy"] == "alice" and "askDateTime" in quest
