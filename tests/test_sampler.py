# ==============================================
# Tests for the DocumentSampler
# ==============================================

import pytest

from dockind.config import SamplingConfig
from dockind.errors import ErrorCode, ReverseEngineeringError
from dockind.storage import DocumentSampler, SamplingPolicy


def _docs(n):
    return [{"_id": i, "n": i} for i in range(n)]


class TestTargetSize:
    def test_absolute(self):
        sampler = DocumentSampler(SamplingPolicy(mode="absolute", absolute_value=250))
        assert sampler.target_size(10_000) == 250

    def test_relative(self):
        sampler = DocumentSampler(SamplingPolicy(mode="relative", relative_value=10))
        assert sampler.target_size(5000) == 500

    def test_relative_rounds_half_up(self):
        sampler = DocumentSampler(SamplingPolicy(mode="relative", relative_value=50))
        assert sampler.target_size(5) == 3

    def test_unknown_count_assumes_thousand(self):
        sampler = DocumentSampler(SamplingPolicy(mode="relative", relative_value=10))
        assert sampler.target_size(None) == 100
        assert sampler.target_size(0) == 100

    def test_zero_size_falls_back(self):
        sampler = DocumentSampler(SamplingPolicy(mode="relative", relative_value=1))
        assert sampler.target_size(20) == 1000

        sampler = DocumentSampler(SamplingPolicy(mode="absolute", absolute_value=0))
        assert sampler.target_size(20) == 1000


class TestPageLimits:
    @pytest.mark.parametrize(
        "size, expected",
        [
            (1, [1]),
            (1000, [1000]),
            (1001, [1000, 1]),
            (2500, [1000, 1000, 500]),
            (3000, [1000, 1000, 1000]),
        ],
    )
    def test_pages(self, size, expected):
        assert DocumentSampler(SamplingPolicy(batch_size=1000)).page_limits(size) == expected


class TestSample:
    def test_pages_do_not_repeat_documents(self, fake_collection):
        collection = fake_collection("c", _docs(25))
        sampler = DocumentSampler(SamplingPolicy(absolute_value=25, batch_size=10))

        documents = sampler.sample(collection)

        assert [doc["n"] for doc in documents] == list(range(25))
        assert collection.find_calls == [
            {"skip": 0, "limit": 10},
            {"skip": 10, "limit": 10},
            {"skip": 20, "limit": 5},
        ]

    def test_stops_on_short_page(self, fake_collection):
        collection = fake_collection("c", _docs(12))
        sampler = DocumentSampler(SamplingPolicy(absolute_value=100, batch_size=10))

        documents = sampler.sample(collection)

        assert len(documents) == 12
        assert len(collection.find_calls) == 2

    def test_bounded_by_target(self, fake_collection):
        collection = fake_collection("c", _docs(50))
        sampler = DocumentSampler(SamplingPolicy(mode="relative", relative_value=10, batch_size=1000))
        assert len(sampler.sample(collection)) == 5

    def test_count_failure_assumes_default(self, fake_collection):
        collection = fake_collection("c", _docs(30), count_error=True)
        sampler = DocumentSampler(SamplingPolicy(mode="relative", relative_value=1))
        # 1% of the assumed 1000 documents
        assert len(sampler.sample(collection)) == 10

    def test_find_failure_raises_typed_error(self, fake_collection):
        collection = fake_collection("c", _docs(3), find_error=True)
        with pytest.raises(ReverseEngineeringError) as excinfo:
            DocumentSampler().sample(collection)
        assert excinfo.value.code is ErrorCode.GET_DATA


class TestSamplingPolicy:
    def test_describe(self):
        assert SamplingPolicy(mode="relative", relative_value=10).describe() == "relative 10%"
        assert SamplingPolicy(mode="relative", relative_value=2.5).describe() == "relative 2.5%"
        assert SamplingPolicy(absolute_value=1000).describe() == "absolute 1000 records max"

    def test_from_config(self):
        policy = SamplingPolicy.from_config(SamplingConfig(mode="relative", relative_value=5, batch_size=200))
        assert policy == SamplingPolicy(mode="relative", absolute_value=1000, relative_value=5, batch_size=200)

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            SamplingPolicy(mode="everything")
