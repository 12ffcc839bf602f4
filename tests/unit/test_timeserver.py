"""
Тесты клиента time-серверов

Coverage:
- декодирование history/today во всех поддерживаемых формах
- контрактные нарушения → TimeServerError
- обмен через настоящий TCP-сокет (локальный сервер)
- ошибки соединения
"""

import socketserver
import threading

import msgpack
import pytest

from ht_ledger.config import LedgerConfig
from ht_ledger.core.domain.calendar import Month, MonthStatus, parse_date
from ht_ledger.fetch import (
    TimeServerError,
    capture,
    decode_history,
    decode_today,
    exchange,
)


def _u128(value: int) -> bytes:
    return value.to_bytes(16, "big")


# =============================================================================
# FIXTURES
# =============================================================================


class _OneShotHandler(socketserver.BaseRequestHandler):
    """Читает один байт запроса, отвечает заданным payload и закрывает соединение"""

    def handle(self):
        self.server.requests.append(self.request.recv(1))
        self.request.sendall(self.server.payload)


def _start_server(payload: bytes):
    server = socketserver.ThreadingTCPServer(("127.0.0.1", 0), _OneShotHandler)
    server.daemon_threads = True
    server.payload = payload
    server.requests = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server


@pytest.fixture
def servers():
    history = _start_server(msgpack.packb([[_u128(10), _u128(0), _u128(30)]], use_bin_type=True))
    today = _start_server(msgpack.packb([_u128(3), ["Greater", "Zero"], 5], use_bin_type=True))
    yield history, today
    for server in (history, today):
        server.shutdown()
        server.server_close()


# =============================================================================
# DECODING
# =============================================================================


class TestDecodeHistory:
    def test_struct_as_array_with_u128_bins(self) -> None:
        data = msgpack.packb([[_u128(1), _u128(0), _u128(2)]], use_bin_type=True)
        assert decode_history(data).last_ten_seconds_per_day == [1, 0, 2]

    def test_named_map(self) -> None:
        data = msgpack.packb({"last_ten_seconds_per_day": [5, 6]})
        assert decode_history(data).last_ten_seconds_per_day == [5, 6]

    def test_negative_violates_contract(self) -> None:
        with pytest.raises(TimeServerError, match="contract"):
            decode_history(msgpack.packb([[-5]]))

    def test_missing_array(self) -> None:
        with pytest.raises(TimeServerError):
            decode_history(msgpack.packb({"other": 1}))

    def test_not_msgpack(self) -> None:
        with pytest.raises(TimeServerError):
            decode_history(b"")


class TestDecodeToday:
    def test_array_with_variant_names(self) -> None:
        packet = decode_today(msgpack.packb([_u128(12), ["Lesser", "Niktvirin"], 7], use_bin_type=True))
        assert packet.to_hdate() == parse_date("0012-LN-07")

    def test_map_with_letters(self) -> None:
        packet = decode_today(msgpack.packb({"year": 1, "month": ["G", "F"], "day": 0, "extra": 1}))
        assert packet.status is MonthStatus.GREATER
        assert packet.month is Month.FUNNY

    def test_variant_indices(self) -> None:
        packet = decode_today(msgpack.packb([2, [1, 3], 4]))
        assert packet.to_hdate() == parse_date("0002-LS-04")

    def test_month_index(self) -> None:
        packet = decode_today(msgpack.packb([2, 9, 4]))
        assert packet.to_hdate() == parse_date("0002-LF-04")

    def test_externally_tagged_variants(self) -> None:
        packet = decode_today(msgpack.packb([2, [{"Lesser": None}, {"Apress": None}], 4]))
        assert packet.to_hdate() == parse_date("0002-LA-04")

    def test_unknown_variant(self) -> None:
        with pytest.raises(TimeServerError, match="unknown variant"):
            decode_today(msgpack.packb([2, ["Medium", "Zero"], 4]))

    def test_day_out_of_range(self) -> None:
        with pytest.raises(TimeServerError, match="contract"):
            decode_today(msgpack.packb([2, 0, 24]))

    def test_missing_field(self) -> None:
        with pytest.raises(TimeServerError, match="missing field"):
            decode_today(msgpack.packb({"year": 2, "month": 0}))


# =============================================================================
# TRANSPORT
# =============================================================================


class TestExchange:
    def test_capture_over_tcp(self, servers) -> None:
        history_server, today_server = servers
        config = LedgerConfig(
            host="127.0.0.1",
            history_port=history_server.server_address[1],
            today_port=today_server.server_address[1],
            timeout_sec=5.0,
        )

        history, today = capture(config)

        assert history.last_ten_seconds_per_day == [10, 0, 30]
        assert today.to_hdate() == parse_date("0003-GZ-05")
        assert history_server.requests == [b"\x00"]
        assert today_server.requests == [b"\x00"]

    def test_connection_refused(self) -> None:
        def refuse(address, timeout):
            raise ConnectionRefusedError(111, "Connection refused")

        with pytest.raises(TimeServerError, match="failed"):
            exchange("localhost", 3926, 1.0, connect=refuse)
