"""
Unit tests for the Redis session layer against an in-memory stand-in client.
"""
import json

import pytest

from thriftfinder.session import session_layer


class FakePipeline:
    def __init__(self, redis):
        self.redis = redis
        self.ops = []

    def get(self, key):
        self.ops.append(lambda: self.redis.get(key))

    def expire(self, key, ttl):
        self.ops.append(lambda: self.redis.expire(key, ttl))

    def execute(self):
        return [op() for op in self.ops]


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def get(self, key):
        return self.data.get(key)

    def expire(self, key, ttl):
        if key in self.data:
            self.ttls[key] = ttl
            return True
        return False

    def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0

    def pipeline(self):
        return FakePipeline(self)


@pytest.fixture
def redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(session_layer, "_redis_client", fake)
    monkeypatch.setattr(session_layer, "_session_ttl", 60)
    return fake


@pytest.mark.unit
class TestSessionLayer:

    def test_round_trip(self, redis):
        session_layer.create_session("tok", {"uid": "user1", "role": "customer", "email": "a@b.co"})
        assert redis.ttls["session:tok"] == 60
        assert session_layer.get_session("tok")["uid"] == "user1"

    def test_read_slides_ttl(self, redis):
        session_layer.create_session("tok", {"uid": "user1", "role": "customer"})
        redis.ttls["session:tok"] = 5
        session_layer.get_session("tok")
        assert redis.ttls["session:tok"] == 60

    def test_requires_uid_and_role(self, redis):
        with pytest.raises(ValueError, match="role"):
            session_layer.create_session("tok", {"uid": "user1"})

    def test_unreadable_payload_dropped(self, redis):
        redis.data["session:tok"] = "{broken"
        assert session_layer.get_session("tok") is None
        assert "session:tok" not in redis.data

    def test_remove(self, redis):
        redis.data["session:tok"] = json.dumps({"uid": "user1", "role": "customer"})
        assert session_layer.remove_session("tok") is True
        assert session_layer.remove_session("tok") is False

    def test_uninitialized(self, monkeypatch):
        monkeypatch.setattr(session_layer, "_redis_client", None)
        with pytest.raises(RuntimeError):
            session_layer.get_session("tok")


@pytest.mark.unit
@pytest.mark.parametrize("header, token", [
    ("Bearer abc", "abc"),
    ("bearer abc", "abc"),
    ("Basic abc", None),
    ("Bearer", None),
    ("Bearer a b", None),
    (None, None),
])
def test_extract_token(header, token):
    assert session_layer.extract_token(header) == token
