import logging
import threading

import pytest

from symbolic_algebra import (
    LogLevel, SimplifyOptions, add, configure_logging, constant, derivative, expand,
    get_logger, mul, power, set_log_level, simplify, var
)
from symbolic_algebra.expression_tree import ConstantTable, get_constant_table
from symbolic_algebra.expression_tree.constants import e, pi

x = var('x')
y = var('y')


@pytest.fixture
def verbose_logging(caplog):
    configure_logging(LogLevel.VERBOSE)
    caplog.set_level(logging.DEBUG, logger='symbolic_algebra')
    yield caplog
    configure_logging(LogLevel.MINIMAL)


def test_constant_table_is_a_singleton():
    table = get_constant_table()
    assert isinstance(table, ConstantTable)
    assert table is get_constant_table()
    assert table.names() == ('pi', 'e')
    assert 'pi' in table and 'tau' not in table
    assert table.get('tau') is None
    assert pi() is table.pi is constant('pi')
    assert e() is table.e


def test_constant_table_is_shared_across_threads():
    seen = []

    def worker():
        seen.append(get_constant_table())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 8
    assert all(table is seen[0] for table in seen)


def test_constant_table_is_read_only():
    table = get_constant_table()
    with pytest.raises(TypeError):
        table._nodes['tau'] = constant('tau', 6)


def test_unknown_constant_needs_a_value():
    with pytest.raises(ValueError):
        constant('tau')
    tau = constant('tau', '6.28')
    assert tau.evaluate() == 2 * constant('tau', 3.14).evaluate()


def test_simplify_rounds_are_logged(verbose_logging):
    simplify(add(mul(2, x), mul(4, y)))
    messages = [record.getMessage() for record in verbose_logging.records]
    assert any("Round  1: 2*(x+2*y)" in message for message in messages)
    assert any("cycle" in message for message in messages)


def test_moderate_level_reports_only_how_simplify_ended(caplog):
    configure_logging(LogLevel.MODERATE)
    caplog.set_level(logging.DEBUG, logger='symbolic_algebra')
    simplify(add(mul(2, x), mul(4, y)))
    simplify(mul(add(x, 1), add(x, 1)), SimplifyOptions(single_pass=True))
    messages = [record.getMessage() for record in caplog.records]
    configure_logging(LogLevel.MINIMAL)

    assert len(messages) == 2
    assert messages[0].startswith("Simplify closed a cycle of length 2 after 2 round(s): 2*(x+2*y)")
    assert messages[1].startswith("Simplify stopped after a single pass after 1 round(s): (x+1)^2")


def test_derivative_requests_are_logged(verbose_logging):
    derivative(power(x, 3), 'x')
    assert any("d/dx of x^3" in record.getMessage() for record in verbose_logging.records)


def test_degree_cap_is_reported(caplog):
    configure_logging(LogLevel.MODERATE)
    caplog.set_level(logging.DEBUG, logger='symbolic_algebra')
    expand(power(add(x, 1), 11))
    configure_logging(LogLevel.MINIMAL)
    assert "exceeds max_degree 10" in caplog.records[0].getMessage()


def test_warnings_and_critical_messages(caplog):
    logger = configure_logging(LogLevel.MINIMAL)
    caplog.set_level(logging.DEBUG, logger='symbolic_algebra')
    logger.warning("careful")
    logger.critical("broken")
    logger.debug("hidden")
    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.ERROR]
    assert caplog.records[1].getMessage() == "CRITICAL: broken"

    caplog.clear()
    configure_logging(LogLevel.SILENT).warning("careful")
    configure_logging(LogLevel.MINIMAL)
    assert caplog.records == []


def test_default_level_is_quiet(caplog):
    configure_logging(LogLevel.MINIMAL)
    caplog.set_level(logging.DEBUG, logger='symbolic_algebra')
    simplify(add(mul(2, x), mul(4, y)))
    assert caplog.records == []


def test_set_log_level_updates_the_global_logger():
    logger = configure_logging(LogLevel.MINIMAL)
    set_log_level(LogLevel.DETAILED)
    assert get_logger() is logger
    assert logger.log_level is LogLevel.DETAILED
    set_log_level(LogLevel.MINIMAL)
