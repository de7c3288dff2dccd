"""Fixtures for connection manager unit tests."""

import asyncio
from collections.abc import Callable
from typing import Any

import pytest
from pytest_mock import MockerFixture, MockType


@pytest.fixture
def handshake_gate() -> asyncio.Event:
    """Event the mocked handshake waits on, so tests control when it finishes."""
    return asyncio.Event()


@pytest.fixture
def mock_connection(mocker: MockerFixture, handshake_gate: asyncio.Event) -> MockType:
    """Connection whose ``execute`` blocks until ``handshake_gate`` is set."""

    async def gated_execute(*_args: Any, **_kwargs: Any) -> None:
        await handshake_gate.wait()

    connection = mocker.MagicMock()
    connection.execute = mocker.AsyncMock(side_effect=gated_execute)
    return connection


@pytest.fixture
def mock_engine(mocker: MockerFixture, mock_connection: MockType) -> MockType:
    """Engine whose ``connect()`` yields ``mock_connection``."""
    engine = mocker.MagicMock()
    engine.connect.return_value.__aenter__.return_value = mock_connection
    engine.connect.return_value.__aexit__.return_value = False
    engine.dispose = mocker.AsyncMock()
    engine.dialect.name = "sqlite"
    return engine


@pytest.fixture
def engine_factory(
    mocker: MockerFixture, mock_engine: MockType
) -> Callable[[str], Any]:
    """Engine factory returning ``mock_engine`` and recording its calls."""
    return mocker.Mock(return_value=mock_engine)
