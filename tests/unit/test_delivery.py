"""Tests for delivery channels."""

import json
import time
import unittest

import requests
from google.cloud import trace_v1

from tracerelay.core.batch_processor import BatchJobConfig, BatchRunner
from tracerelay.core.tracing.adapters import LocalEndpoint, convert_cloud_spans, convert_zipkin_spans
from tracerelay.core.tracing.delivery import (
    BatchedDelivery,
    SyncDelivery,
    ZipkinHTTPDelivery,
    build_trace,
    build_zipkin_url,
)
from tests.utils import FakeSession, FakeTraceClient, create_test_trace


class TestSyncDelivery(unittest.TestCase):
    def setUp(self):
        self.client = FakeTraceClient()
        self.channel = SyncDelivery(self.client, "my-project")
        self.spans = convert_cloud_spans(create_test_trace(trace_id="b" * 32))

    def test_inserts_trace_container(self):
        self.assertTrue(self.channel.deliver("b" * 32, self.spans))

        self.assertEqual(len(self.client.calls), 1)
        self.assertEqual(self.client.calls[0]["project_id"], "my-project")
        (trace,) = self.client.inserted_traces
        self.assertEqual(trace.trace_id, "b" * 32)
        self.assertEqual(trace.project_id, "my-project")
        self.assertEqual(len(trace.spans), 2)

    def test_no_spans_skips_network(self):
        self.assertFalse(self.channel.deliver("b" * 32, []))
        self.assertEqual(self.client.calls, [])

    def test_client_error_returns_false(self):
        channel = SyncDelivery(FakeTraceClient(error=RuntimeError("unavailable")), "my-project")
        with self.assertLogs("tracerelay.core.tracing.delivery.cloud", level="ERROR") as logs:
            self.assertFalse(channel.deliver("b" * 32, self.spans))
        self.assertIn("unavailable", logs.output[0])


class TestBatchedDelivery(unittest.TestCase):
    def setUp(self):
        self.client = FakeTraceClient()
        self.runner = BatchRunner()
        self.spans = convert_cloud_spans(create_test_trace())

    def tearDown(self):
        self.runner.stop(timeout=1.0)

    def make_channel(self, **config):
        return BatchedDelivery(
            self.client,
            "my-project",
            identifier="test-trace",
            batch_config=BatchJobConfig(**config),
            batch_runner=self.runner,
        )

    def test_enqueue_does_not_call_client(self):
        channel = self.make_channel(call_period=10.0)
        self.assertTrue(channel.deliver("a" * 32, self.spans))
        self.assertEqual(self.client.calls, [])
        self.assertEqual(self.runner.get_job("test-trace").queue_size, 1)

    def test_flushes_on_call_period(self):
        channel = self.make_channel(call_period=0.05, worker_num=1)
        channel.deliver("a" * 32, self.spans)
        channel.deliver("c" * 32, self.spans)

        time.sleep(0.3)

        self.assertEqual([t.trace_id for t in self.client.inserted_traces], ["a" * 32, "c" * 32])

    def test_groups_items_up_to_batch_size(self):
        channel = self.make_channel(call_period=10.0, batch_size=2)
        for i in range(5):
            channel.deliver(f"{i:032x}", self.spans)

        self.runner.stop(timeout=1.0)

        self.assertEqual(len(self.client.inserted_traces), 5)
        self.assertTrue(all(len(call["traces"].traces) <= 2 for call in self.client.calls))

    def test_no_spans_not_queued(self):
        channel = self.make_channel(call_period=10.0)
        self.assertFalse(channel.deliver("a" * 32, []))
        self.assertEqual(self.runner.get_job("test-trace").queue_size, 0)

    def test_stopped_queue_returns_false(self):
        channel = self.make_channel(call_period=10.0)
        self.runner.stop(timeout=1.0)
        self.assertFalse(channel.deliver("a" * 32, self.spans))

    def test_full_queue_returns_false(self):
        channel = self.make_channel(call_period=10.0, batch_size=10, max_queue_size=1)
        self.assertTrue(channel.deliver("a" * 32, self.spans))
        self.assertFalse(channel.deliver("c" * 32, self.spans))
        self.assertEqual(self.runner.get_job("test-trace").dropped_item_count, 1)

    def test_queued_item_is_trace_container(self):
        channel = self.make_channel(call_period=10.0)
        channel.deliver("a" * 32, self.spans)
        self.runner.get_job("test-trace").flush()

        (trace,) = self.client.inserted_traces
        self.assertIsInstance(trace, trace_v1.Trace)
        self.assertEqual(trace.project_id, "my-project")


class TestBuildTrace(unittest.TestCase):
    def test_container(self):
        spans = convert_cloud_spans(create_test_trace())
        trace = build_trace("proj", "d" * 32, spans)
        self.assertEqual(trace.project_id, "proj")
        self.assertEqual(trace.trace_id, "d" * 32)
        self.assertEqual(list(trace.spans), spans)


class TestZipkinHTTPDelivery(unittest.TestCase):
    def setUp(self):
        endpoint = LocalEndpoint(service_name="svc", ipv4="10.0.0.1", port=80)
        self.spans = convert_zipkin_spans(create_test_trace(), {}, endpoint)

    def test_posts_json(self):
        session = FakeSession()
        channel = ZipkinHTTPDelivery("http://zipkin:9411/api/v2/spans", session=session, timeout=3.0)

        self.assertTrue(channel.deliver("a" * 32, self.spans))

        (post,) = session.posts
        self.assertEqual(post["url"], "http://zipkin:9411/api/v2/spans")
        self.assertEqual(post["headers"], {"Content-Type": "application/json"})
        self.assertEqual(post["timeout"], 3.0)
        self.assertEqual(json.loads(post["data"]), self.spans)

    def test_error_status_still_counts_as_delivered(self):
        session = FakeSession(status_code=500)
        channel = ZipkinHTTPDelivery("http://zipkin:9411/api/v2/spans", session=session)
        with self.assertLogs("tracerelay.core.tracing.delivery.http", level="WARNING"):
            self.assertTrue(channel.deliver("a" * 32, self.spans))

    def test_connection_error_returns_false(self):
        session = FakeSession(error=requests.ConnectionError("refused"))
        channel = ZipkinHTTPDelivery("http://zipkin:9411/api/v2/spans", session=session)
        with self.assertLogs("tracerelay.core.tracing.delivery.http", level="ERROR"):
            self.assertFalse(channel.deliver("a" * 32, self.spans))

    def test_unserializable_payload_returns_false(self):
        session = FakeSession()
        channel = ZipkinHTTPDelivery("http://zipkin:9411/api/v2/spans", session=session)
        self.assertFalse(channel.deliver("a" * 32, [{"tags": object()}]))
        self.assertEqual(session.posts, [])

    def test_no_spans_skips_network(self):
        session = FakeSession()
        channel = ZipkinHTTPDelivery("http://zipkin:9411/api/v2/spans", session=session)
        self.assertFalse(channel.deliver("a" * 32, []))
        self.assertEqual(session.posts, [])

    def test_close_closes_session(self):
        session = FakeSession()
        ZipkinHTTPDelivery("http://zipkin:9411", session=session).close()
        self.assertTrue(session.closed)

    def test_build_url(self):
        self.assertEqual(build_zipkin_url("localhost", 9411), "http://localhost:9411/api/v2/spans")
        self.assertEqual(build_zipkin_url("h", 1, "/spans"), "http://h:1/spans")
