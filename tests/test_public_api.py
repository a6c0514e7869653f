from __future__ import annotations

import httpprom
import httpprom.core as core


def test_package_all_names_resolve() -> None:
    for module in (httpprom, core):
        missing = [name for name in module.__all__ if not hasattr(module, name)]
        assert not missing, f"{module.__name__}: {missing}"


def test_package_reexports_are_the_core_objects() -> None:
    for name in httpprom.__all__:
        if name == "__version__":
            continue
        assert getattr(httpprom, name) is getattr(core, name)


def test_public_surface_covers_counter_and_encoder() -> None:
    expected = {
        # label-partitioned counter
        "MetricDescriptor",
        "CounterVec",
        "Registry",
        "default_registry",
        "register_counter",
        # exposition encoder
        "CONTENT_TYPE",
        "encode",
        "render",
        "write_to",
        # error kinds
        "MetricsError",
        "DuplicateMetricName",
        "LabelCardinalityMismatch",
        "InvalidMetricDescriptor",
        "EncodingIOFailure",
        # process collector
        "ProcessCollector",
    }

    assert expected <= set(httpprom.__all__)


def test_error_kinds_share_a_base_with_stable_codes() -> None:
    errors = [
        (core.DuplicateMetricName("x"), "duplicate_metric_name"),
        (core.LabelCardinalityMismatch("x", ["a"], []), "label_cardinality_mismatch"),
        (core.InvalidMetricDescriptor("bad"), "invalid_metric_descriptor"),
        (core.EncodingIOFailure("io"), "encoding_io_failure"),
    ]

    for exc, code in errors:
        assert isinstance(exc, core.MetricsError)
        assert exc.code == code

