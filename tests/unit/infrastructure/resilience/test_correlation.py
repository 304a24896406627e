import uuid

from resilient.infrastructure.resilience.correlation import new_correlation_id


def test_correlation_id_is_a_uuid4_string():
    correlation_id = new_correlation_id()
    assert isinstance(correlation_id, str)
    assert uuid.UUID(correlation_id).version == 4


def test_correlation_ids_are_unique():
    ids = {new_correlation_id() for _ in range(1000)}
    assert len(ids) == 1000
