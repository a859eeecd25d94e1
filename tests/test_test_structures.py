from greenkart_e2e.data import RunSummary, SpecResult, StepRecord, TestResult, TestStatus


def make_test(status: TestStatus, title: str = 'adds berries') -> TestResult:
    return TestResult(spec='validations/e2etest_spec', suite='checkout', title=title, status=status)


def test_test_result_lifecycle() -> None:
    result = make_test(TestStatus.PENDING)

    result.start()
    assert result.status == TestStatus.RUNNING
    result.complete(success=False, error_message='boom')

    assert result.status == TestStatus.FAILED
    assert result.error_message == 'boom'
    assert result.duration is not None and result.duration >= 0
    assert result.full_title == 'checkout -- adds berries'


def test_spec_status_rules() -> None:
    assert SpecResult(spec='a', tests=[make_test(TestStatus.PASSED), make_test(TestStatus.SKIPPED)]).status == TestStatus.PASSED
    assert SpecResult(spec='a', tests=[make_test(TestStatus.PASSED), make_test(TestStatus.FAILED)]).status == TestStatus.FAILED
    assert SpecResult(spec='a', tests=[make_test(TestStatus.SKIPPED)]).status == TestStatus.SKIPPED
    assert SpecResult(spec='a', error_message='browser crashed').status == TestStatus.FAILED


def test_run_summary_stats_and_dict() -> None:
    failing = make_test(TestStatus.FAILED, 'checks out')
    failing.steps.append(StepRecord(id=1, command='click', message='.chkAgree', status=TestStatus.FAILED, error='timeout'))
    summary = RunSummary(
        base_url='https://greenkart.test/',
        specs=[
            SpecResult(spec='validations/e2etest_spec', tests=[make_test(TestStatus.PASSED), failing]),
            SpecResult(spec='validations/test1_spec', tests=[make_test(TestStatus.PASSED)]),
        ],
    )
    summary.start()
    summary.complete()

    stats = summary.get_summary_stats()
    assert stats['total_specs'] == 2
    assert stats['failed_specs'] == 1
    assert (stats['total'], stats['passed'], stats['failed'], stats['skipped']) == (3, 2, 1, 0)
    assert summary.success is False

    data = summary.to_dict()
    assert data['specs'][0]['status'] == 'failed'
    assert data['specs'][0]['tests'][1]['steps'][0]['status'] == 'failed'
    assert data['specs'][1]['status'] == 'passed'


def test_empty_run_is_not_success() -> None:
    assert RunSummary(base_url='x').success is False
