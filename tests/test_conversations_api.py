import json


def _headers(ip):
    return {"X-Forwarded-For": ip}


def _create(client, ip):
    resp = client.post("/api/conversations", headers=_headers(ip))
    assert resp.status_code == 201
    return resp.json()


def _drain(client, conversation_id, parse_events, ip):
    with client.stream(
        "GET",
        f"/api/conversations/{conversation_id}/events",
        params={"until_idle": "true"},
        headers=_headers(ip),
    ) as resp:
        assert resp.status_code == 200
        return parse_events(resp)


def test_create_conversation_returns_welcome(api_client):
    data = _create(api_client, "10.0.0.1")
    assert data["busy"] is False
    assert len(data["messages"]) == 1
    assert data["messages"][0]["sender"] == "agent"
    assert "I feel anxious" in data["messages"][0]["suggested_actions"]


def test_submit_message_and_stream_reply(api_client, parse_events):
    ip = "10.0.0.2"
    conversation_id = _create(api_client, ip)["id"]

    resp = api_client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"text": "I feel anxious about work"},
        headers=_headers(ip),
    )
    assert resp.status_code == 202
    assert resp.json() == {"accepted": True, "busy": True}

    events = _drain(api_client, conversation_id, parse_events, ip)
    messages = [json.loads(data) for name, data in events if name == "message"]
    assert [m["sender"] for m in messages] == ["agent", "user", "agent"]
    assert messages[-1]["category"] == "anxiety"
    assert messages[-1]["escalate"] is False
    assert events[-1][0] == "done"
    assert not any(name == "escalation" for name, _ in events)

    detail = api_client.get(
        f"/api/conversations/{conversation_id}", headers=_headers(ip)
    ).json()
    assert detail["busy"] is False
    assert len(detail["messages"]) == 3


def test_crisis_message_streams_escalation(api_client, parse_events):
    ip = "10.0.0.3"
    conversation_id = _create(api_client, ip)["id"]
    api_client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"text": "I want to die"},
        headers=_headers(ip),
    )

    events = _drain(api_client, conversation_id, parse_events, ip)
    escalations = [json.loads(data) for name, data in events if name == "escalation"]
    assert len(escalations) == 1
    assert escalations[0]["title"] == "Crisis Support Available"
    assert "Call 988 now" in escalations[0]["resources"]

    agent = [json.loads(data) for name, data in events if name == "message"][-1]
    assert agent["escalate"] is True
    assert escalations[0]["message_id"] == agent["id"]
    names = [name for name, _ in events]
    assert names[names.index("escalation") - 1] == "message"


def test_reconnecting_client_still_receives_escalation(api_client, parse_events):
    ip = "10.0.0.9"
    conversation_id = _create(api_client, ip)["id"]
    api_client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"text": "I can't cope"},
        headers=_headers(ip),
    )
    _drain(api_client, conversation_id, parse_events, ip)

    events = _drain(api_client, conversation_id, parse_events, ip)
    names = [name for name, _ in events]
    assert names == ["message", "message", "message", "escalation", "done"]


def test_blank_message_is_not_accepted(api_client):
    ip = "10.0.0.4"
    conversation_id = _create(api_client, ip)["id"]
    resp = api_client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"text": "   "},
        headers=_headers(ip),
    )
    assert resp.status_code == 202
    assert resp.json() == {"accepted": False, "busy": False}

    detail = api_client.get(
        f"/api/conversations/{conversation_id}", headers=_headers(ip)
    ).json()
    assert len(detail["messages"]) == 1


def test_suggested_action_endpoint(api_client, parse_events):
    ip = "10.0.0.5"
    conversation_id = _create(api_client, ip)["id"]
    resp = api_client.post(
        f"/api/conversations/{conversation_id}/actions",
        json={"action": "How to sleep better?"},
        headers=_headers(ip),
    )
    assert resp.json()["accepted"] is True

    events = _drain(api_client, conversation_id, parse_events, ip)
    messages = [json.loads(data) for name, data in events if name == "message"]
    assert messages[1]["content"] == "How to sleep better?"
    assert messages[2]["category"] == "sleep"


def test_unknown_conversation_and_long_message(api_client):
    ip = "10.0.0.6"
    resp = api_client.get("/api/conversations/missing", headers=_headers(ip))
    assert resp.status_code == 404

    conversation_id = _create(api_client, ip)["id"]
    resp = api_client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"text": "x" * 5001},
        headers=_headers(ip),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Message too long"


def test_health_version_and_config(api_client):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    assert "version" in api_client.get("/api/version").json()
    config = api_client.get("/api/config").json()
    assert config["KEYWORD_MATCH_MODE"] in ("substring", "word")


def test_conversation_creation_is_rate_limited(api_client):
    ip = "10.0.1.1"
    statuses = [
        api_client.post("/api/conversations", headers=_headers(ip)).status_code
        for _ in range(11)
    ]
    assert statuses[:10] == [201] * 10
    assert statuses[10] == 429
