import pytest

from studycore.core.exceptions import CodeSpaceExhausted
from studycore.services import session_code_service
from studycore.services.session_code_service import allocate, is_valid_code, normalize_code


def test_allocated_code_shape():
    code = allocate(set())
    assert is_valid_code(code)
    assert code == code.upper()


def test_allocation_avoids_active_codes(monkeypatch):
    draws = iter(["ABC123", "abc123", "XYZ789"])
    monkeypatch.setattr(session_code_service, "generate_code", lambda: next(draws).upper())

    assert allocate({"abc123"}) == "XYZ789"


def test_allocation_never_collides_with_active_set():
    active = {allocate(set()) for _ in range(200)}
    for _ in range(200):
        assert allocate(active) not in active


def test_allocation_gives_up_after_max_attempts(monkeypatch):
    monkeypatch.setattr(session_code_service, "generate_code", lambda: "AAAAAA")

    with pytest.raises(CodeSpaceExhausted):
        allocate({"AAAAAA"}, max_attempts=5)


def test_full_code_space_is_exhausted(monkeypatch):
    monkeypatch.setattr(session_code_service, "CODE_SPACE", 2)

    with pytest.raises(CodeSpaceExhausted):
        allocate({"AAAAAA", "BBBBBB"})


def test_normalize_and_validate():
    assert normalize_code("  k3x9qa ") == "K3X9QA"
    assert not is_valid_code("K3X9Q")
    assert not is_valid_code("K3X9Q!")
