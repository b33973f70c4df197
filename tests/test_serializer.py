import json
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

import pytest

from log_analytics_collector.models import LogRecord
from log_analytics_collector.serializer import record_to_dict, to_payload

AGENT_ID = UUID("12345678-1234-5678-1234-567812345678")

class Heartbeat(LogRecord):
    Computer: str
    Healthy: bool
    Latency: float
    AgentId: UUID

@dataclass
class Login:
    User: str
    At: datetime

def test_round_trip_preserves_records():
    records = [
        {"Name": "first", "Value": 1.5, "Ok": True},
        {"Name": "second", "Value": 2.0, "Ok": False},
        {"Name": "third", "Value": -0.25, "Ok": True},
    ]
    decoded = json.loads(to_payload(records))
    assert decoded == records

def test_field_order_follows_declaration():
    record = Heartbeat(Computer="web-01", Healthy=True, Latency=3.0, AgentId=AGENT_ID)
    payload = to_payload([record])
    assert list(json.loads(payload)[0]) == ["Computer", "Healthy", "Latency", "AgentId"]

def test_uuid_and_datetime_are_strings():
    at = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    decoded = json.loads(to_payload([{"Id": AGENT_ID, "At": at}]))
    assert decoded == [{"Id": str(AGENT_ID), "At": "2024-05-01T08:30:00+00:00"}]

def test_dataclass_records_are_serialized():
    at = datetime(2024, 5, 1, 8, 30)
    assert record_to_dict(Login(User="ana", At=at)) == {"User": "ana", "At": at}
    decoded = json.loads(to_payload([Login(User="ana", At=at)]))
    assert decoded == [{"User": "ana", "At": "2024-05-01T08:30:00"}]

class StampedLogin(LogRecord):
    User: str
    At: datetime

def test_datetimes_have_one_format_for_every_record_kind():
    at = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    from_model = json.loads(to_payload([StampedLogin(User="ana", At=at)]))
    from_dataclass = json.loads(to_payload([Login(User="ana", At=at)]))
    from_mapping = json.loads(to_payload([{"User": "ana", "At": at}]))
    assert from_model == from_dataclass == from_mapping == [{"User": "ana", "At": "2024-05-01T08:30:00+00:00"}]

def test_model_records_serialize_uuid_as_string():
    record = Heartbeat(Computer="web-01", Healthy=False, Latency=1.0, AgentId=AGENT_ID)
    assert json.loads(to_payload([record]))[0]["AgentId"] == str(AGENT_ID)

@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_doubles_never_reach_the_payload(value):
    with pytest.raises(ValueError):
        to_payload([{"Value": value}])

def test_non_ascii_text_is_kept_as_utf8():
    payload = to_payload([{"City": "Montréal"}])
    assert "Montréal" in payload
    assert len(payload.encode("utf-8")) == len(payload) + 1

def test_empty_batch_is_an_empty_array():
    assert to_payload([]) == "[]"
