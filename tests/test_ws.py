"""WebSocket integration tests using FastAPI TestClient."""

from starlette.testclient import TestClient

from gomoku.main import app


class TestWebSocketIntegration:
    def test_health_endpoint(self):
        with TestClient(app) as client:
            resp = client.get("/health")
            assert resp.status_code == 200
            assert resp.json() == {"status": "ok"}

    def test_new_session(self):
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"type": "new_session"})
                data = ws.receive_json()
                assert data["type"] == "session_created"
                assert len(data["session_id"]) == 6
                state = ws.receive_json()
                assert state["type"] == "state"
                assert state["current_player"] == "black"

    def test_invalid_message(self):
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"type": "unknown_type"})
                data = ws.receive_json()
                assert data["type"] == "error"
                assert data["code"] == "bad_message"

    def test_full_game_flow(self):
        """Both players share one socket, play to a win, take it back and win again."""
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"type": "new_session"})
                ws.receive_json()
                ws.receive_json()

                for i in range(4):
                    ws.send_json({"type": "place_stone", "row": 7, "col": i})
                    assert ws.receive_json()["status"] == "in_progress"
                    ws.send_json({"type": "place_stone", "row": 8, "col": i})
                    assert ws.receive_json()["status"] == "in_progress"

                ws.send_json({"type": "place_stone", "row": 7, "col": 4})
                state = ws.receive_json()
                assert state["status"] == "won"
                assert state["winner"] == "black"

                ws.send_json({"type": "place_stone", "row": 0, "col": 0})
                error = ws.receive_json()
                assert error["type"] == "error"
                assert error["code"] == "game_over"

                ws.send_json({"type": "undo"})
                state = ws.receive_json()
                assert state["status"] == "in_progress"
                assert state["current_player"] == "black"
                assert state["board"][7][4] is None
                assert state["history_depth"] == 8

                ws.send_json({"type": "reset"})
                state = ws.receive_json()
                assert state["move_count"] == 0
                assert state["undo_available"] is False

    def test_two_tabs_share_a_session(self):
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws1:
                ws1.send_json({"type": "new_session"})
                session_id = ws1.receive_json()["session_id"]
                ws1.receive_json()

                with client.websocket_connect("/ws") as ws2:
                    ws2.send_json({"type": "attach", "session_id": session_id})
                    assert ws2.receive_json()["session_id"] == session_id
                    ws2.receive_json()

                    ws2.send_json({"type": "place_stone", "row": 5, "col": 5})
                    assert ws1.receive_json()["board"][5][5] == "black"
                    assert ws2.receive_json()["board"][5][5] == "black"

    def test_non_json_frames_are_reported(self):
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"type": "new_session"})
                session_id = ws.receive_json()["session_id"]
                ws.receive_json()

                ws.send_text("not json")
                error = ws.receive_json()
                assert error["type"] == "error"
                assert error["code"] == "bad_message"

                ws.send_bytes(b"\x00\x01")
                assert ws.receive_json()["code"] == "bad_message"

                # The socket is still usable afterwards
                ws.send_json({"type": "place_stone", "row": 0, "col": 0})
                assert ws.receive_json()["board"][0][0] == "black"

            assert session_id not in app.state.sessions.sessions

    def test_session_closed_when_socket_leaves(self):
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"type": "new_session"})
                session_id = ws.receive_json()["session_id"]
                ws.receive_json()
                ws.send_text("{broken")
                ws.receive_json()
            assert session_id not in app.state.sessions.sessions
