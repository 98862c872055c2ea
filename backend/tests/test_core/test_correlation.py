"""Tests for correlation ids in the request context and in domain exceptions."""

import re
from concurrent.futures import ThreadPoolExecutor

from core.correlation import (
    correlation_id_var,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from models.exceptions import DomainException, StudyGroupNotFoundException


class TestGenerateCorrelationId:
    """Tests for generate_correlation_id."""

    def test_returns_8_hex_characters(self) -> None:
        assert re.match(r"^[0-9a-f]{8}$", generate_correlation_id())

    def test_generates_unique_ids(self) -> None:
        ids = {generate_correlation_id() for _ in range(500)}
        assert len(ids) == 500


class TestCorrelationIdContext:
    """Tests for the correlation id context variable."""

    def test_set_and_get(self) -> None:
        set_correlation_id("abc12345")
        assert get_correlation_id() == "abc12345"

    def test_empty_when_not_set(self) -> None:
        correlation_id_var.set("")
        assert get_correlation_id() == ""

    def test_threads_do_not_share_ids(self) -> None:
        """Each worker thread starts from its own empty context."""

        def read_after_set(worker: int) -> str:
            set_correlation_id(f"worker{worker:02d}")
            return get_correlation_id()

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(read_after_set, range(8)))

        assert results == [f"worker{i:02d}" for i in range(8)]


class TestDomainExceptionCorrelationId:
    """Domain exceptions pick up the request's correlation id."""

    def setup_method(self) -> None:
        set_correlation_id("")

    def test_uses_context_id(self) -> None:
        set_correlation_id("ctx00001")

        assert DomainException("boom").correlation_id == "ctx00001"

    def test_generates_id_without_context(self) -> None:
        exc = StudyGroupNotFoundException(3)

        assert re.match(r"^[0-9a-f]{8}$", exc.correlation_id)

    def test_explicit_id_wins(self) -> None:
        set_correlation_id("ctx00001")

        exc = DomainException("boom", correlation_id="explicit")

        assert exc.correlation_id == "explicit"
