"""End-to-end conversions through :func:`hdmat.conversion.pipeline.convert`."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from hdmat.conversion.pipeline import ArchiveConverter, convert, inspect_archive
from hdmat.interfaces.config import ConversionConfig
from hdmat.interfaces.errors import ConfigurationError
from hdmat.interfaces.launch_options import ConvertOptions
from hdmat.store import is_complete, load_store
from hdmat.utils.console import LOGGER_NAME


def test_convert_writes_complete_store(archive, tmp_path) -> None:
    root, metadata, data = archive
    destination = tmp_path / "out" / "hd.h5"

    result = convert(ConvertOptions(source=root, destination=destination), config=ConversionConfig())

    assert result.destination == destination.resolve()
    assert result.columns == metadata.num_timesteps
    assert is_complete(destination)

    fields = load_store(destination)
    np.testing.assert_array_equal(fields["UVelocity"], data[2].T)
    np.testing.assert_array_equal(fields["UVelocityTimeRow"], data[2])
    np.testing.assert_array_equal(fields["Time"], metadata.time)
    np.testing.assert_array_equal(fields["TimestepIndices"], np.arange(1, 11))
    assert "MassFlux" not in fields


def test_destination_defaults_next_to_source(archive) -> None:
    root, _, _ = archive
    result = ArchiveConverter(ConversionConfig(verbose=False)).convert(ConvertOptions(source=root))

    assert result.destination == root.resolve().with_suffix(".h5")
    assert result.destination.exists()


def test_destination_directory_uses_source_stem(archive, tmp_path) -> None:
    root, _, _ = archive
    target_dir = tmp_path / "stores"
    target_dir.mkdir()

    result = convert(ConvertOptions(source=root, destination=target_dir), config=ConversionConfig())

    assert result.destination == (target_dir / f"{root.name}.h5").resolve()


def test_options_override_config(archive, tmp_path) -> None:
    root, _, data = archive
    destination = tmp_path / "strided.h5"
    options = ConvertOptions(
        source=root,
        destination=destination,
        timesteps=list(range(2, 10)),
        stride=3,
        all_parameters=False,
    )

    result = convert(options, config=ConversionConfig(stride=1, all_parameters=True))

    assert result.index_plan.timesteps.tolist() == [2, 5, 8]
    assert set(result.summary.streamed_fields) == {"SurfaceElevation", "UVelocity", "VVelocity"}
    assert result.summary.allocated_fields == ("CurrentSpeed",)
    fields = load_store(destination)
    np.testing.assert_array_equal(fields["VVelocity"], data[3][[1, 4, 7]].T)
    assert "CurrentSpeedTimeRow" not in fields


def test_configuration_error_leaves_no_store(archive, tmp_path) -> None:
    root, metadata, _ = archive
    destination = tmp_path / "never.h5"

    with pytest.raises(ConfigurationError):
        convert(
            ConvertOptions(source=root, destination=destination, timesteps=[metadata.num_timesteps + 1]),
            config=ConversionConfig(),
        )
    assert not destination.exists()


def test_ambiguous_rule_leaves_no_store(archive, tmp_path) -> None:
    root, _, _ = archive
    destination = tmp_path / "never.h5"

    with pytest.raises(ConfigurationError):
        convert(
            ConvertOptions(source=root, destination=destination),
            config=ConversionConfig(horizontal_velocity="velocity"),
        )
    assert not destination.exists()


def test_inspect_archive(archive) -> None:
    root, metadata, _ = archive
    inspected = inspect_archive(root)

    assert inspected.parameter_names == metadata.parameter_names
    assert inspected.num_timesteps == metadata.num_timesteps


@pytest.fixture
def package_records(caplog, monkeypatch):
    """Route ``hdmat`` records to ``caplog`` even after the CLI disabled propagation."""
    monkeypatch.setattr(logging.getLogger(LOGGER_NAME), "propagate", True)
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    return caplog


def _info_messages(caplog) -> list[str]:
    return [
        record.getMessage()
        for record in caplog.records
        if record.name.startswith(LOGGER_NAME) and record.levelno == logging.INFO
    ]


def test_quiet_conversion_logs_no_info(archive, tmp_path, package_records) -> None:
    root, _, _ = archive
    options = ConvertOptions(source=root, destination=tmp_path / "quiet.h5", verbose=False)

    convert(options, config=ConversionConfig(progress_interval=1))

    assert _info_messages(package_records) == []
    assert logging.getLogger(LOGGER_NAME).level == logging.INFO


def test_verbose_conversion_reports_progress(archive, tmp_path, package_records) -> None:
    root, metadata, _ = archive
    options = ConvertOptions(source=root, destination=tmp_path / "loud.h5")

    convert(options, config=ConversionConfig(verbose=True, progress_interval=1))

    messages = _info_messages(package_records)
    assert "Timestep 1 of 10" in messages
    assert f"Timestep {metadata.num_timesteps} of {metadata.num_timesteps}" in messages
    assert any(message.startswith("DONE!") for message in messages)
