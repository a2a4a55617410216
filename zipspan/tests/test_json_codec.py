"""Tests for the canonical JSON form."""

import json

import pytest

from zipspan import DecodeError, Endpoint, Kind, Span, decode, decode_bytes, encode, encode_bytes
from zipspan.codec import to_dict

FRONTEND = Endpoint.create(service_name="frontend", ip="127.0.0.1")
BACKEND = Endpoint.create(service_name="backend", ip="192.168.99.101", port=9000)


@pytest.fixture
def client_span():
    return (
        Span.builder()
        .trace_id("7180c278b62e8f6a216a2aea45d08fc9")
        .parent_id("6b221d5bc9e6496c")
        .id("5b4185666d50f68b")
        .name("get")
        .kind(Kind.CLIENT)
        .local_endpoint(FRONTEND)
        .remote_endpoint(BACKEND)
        .timestamp(1472470996199000)
        .duration(207000)
        .add_annotation(1472470996238000, "ws")
        .add_annotation(1472470996403000, "wr")
        .put_tag("http.path", "/api")
        .put_tag("clnt/finagle.version", "6.45.0")
        .build()
    )


def test_minimal():
    span = Span.builder().trace_id("1").id("2").build()
    assert encode(span) == '{"traceId":"0000000000000001","id":"0000000000000002"}'


def test_field_order(client_span):
    span = client_span.to_builder().debug(True).shared(True).build()
    assert list(to_dict(span)) == [
        "traceId",
        "parentId",
        "id",
        "kind",
        "name",
        "timestamp",
        "duration",
        "localEndpoint",
        "remoteEndpoint",
        "annotations",
        "tags",
        "debug",
        "shared",
    ]


def test_values(client_span):
    parsed = json.loads(encode(client_span))
    assert parsed["kind"] == "CLIENT"
    assert parsed["remoteEndpoint"] == {"serviceName": "backend", "ipv4": "192.168.99.101", "port": 9000}
    assert parsed["annotations"][0] == {"timestamp": 1472470996238000, "value": "ws"}
    assert "debug" not in parsed
    assert "shared" not in parsed


def test_decode(client_span):
    assert decode(encode(client_span)) == client_span


def test_decode_bytes(client_span):
    data = encode_bytes(client_span)
    assert isinstance(data, bytes)
    assert decode_bytes(data) == client_span


def test_decode_unicode():
    span = Span.builder().trace_id("1").id("1").put_tag("greeting", "héllo").build()
    assert decode_bytes(encode_bytes(span)).tags["greeting"] == "héllo"


def test_decode_normalizes():
    span = decode('{"traceId":"1","id":"A","name":"GET","timestamp":0,"localEndpoint":{}}')
    assert span.trace_id == "0000000000000001"
    assert span.id == "000000000000000a"
    assert span.name == "get"
    assert span.timestamp is None
    assert span.local_endpoint is None


def test_decode_ipv6_endpoint():
    span = decode('{"traceId":"1","id":"1","localEndpoint":{"ipv4":"10.0.0.1","ipv6":"::1"}}')
    assert span.local_endpoint == Endpoint(ipv4="10.0.0.1", ipv6="::1")


@pytest.mark.parametrize(
    "data",
    [
        "",
        "not json",
        "[]",
        '{"id":"1"}',
        '{"traceId":"1"}',
        '{"traceId":"","id":"1"}',
        '{"traceId":"1","id":"1","annotations":[1]}',
        '{"traceId":"1","id":"1","tags":["a"]}',
        '{"traceId":"1","id":"1","kind":"sideways"}',
        '{"traceId":"1","id":"1","localEndpoint":"x"}',
        '{"traceId":"1","id":"1","localEndpoint":{"ipv4":5}}',
        '{"traceId":"1","id":"1","annotations":5}',
        '{"traceId":"1","id":"1","name":5}',
        '{"traceId":"1","id":"1","debug":"false"}',
        '{"traceId":"1","id":"1","tags":{"status":200}}',
    ],
)
def test_decode_invalid(data):
    with pytest.raises(DecodeError):
        decode(data)


def test_decode_bytes_invalid_utf8():
    with pytest.raises(DecodeError):
        decode_bytes(b'\xff\xfe')


def test_decode_flags():
    span = decode('{"traceId":"1","id":"1","debug":true,"shared":false}')
    assert span.debug is True
    assert span.shared is False


def test_decode_null_collections():
    span = decode('{"traceId":"1","id":"1","annotations":null,"tags":null}')
    assert span.annotations == ()
    assert span.tags == {}


def test_round_trip_unnormalized_endpoint():
    span = (
        Span.builder()
        .trace_id("1")
        .id("1")
        .local_endpoint(Endpoint(service_name="Frontend", ipv4="127.0.0.1", port=0))
        .build()
    )
    assert decode(encode(span)) == span
    assert span.local_endpoint == FRONTEND
