from bittrex_notifier.results import StageResult, StageStatus


def test_result_helpers():
    assert StageResult.ok("x").is_ok
    assert StageResult.ok("x").value == "x"
    degraded = StageResult.degraded("no chart")
    assert degraded.status is StageStatus.DEGRADED
    assert not degraded.is_ok and not degraded.is_fatal
    assert StageResult.fatal("down").is_fatal
