import json
from pathlib import Path

import pytest

from greenkart_e2e.data import RunSummary, SpecResult, StepRecord, TestResult, TestStatus
from greenkart_e2e.executor import ResultAggregator


def build_summary() -> RunSummary:
    failing = TestResult(
        spec='validations/e2etest_spec',
        suite='navigate to Website, add items and checkout',
        title='Navigates to Website',
        status=TestStatus.FAILED,
        error_message='TimeoutError: Locator.click: Timeout 4000ms exceeded.',
        screenshots=['artifacts/screenshots/e2etest_spec.py/x (failed).png'],
        steps=[
            StepRecord(id=1, command='visit', message='https://greenkart.test/'),
            StepRecord(id=2, command='click', message='.chkAgree', status=TestStatus.FAILED, error='Timeout'),
        ],
    )
    return RunSummary(
        base_url='https://greenkart.test/',
        specs=[
            SpecResult(spec='validations/e2etest_spec', tests=[failing]),
            SpecResult(spec='validations/test1_spec', error_message='Spec execution failed: browser failed to start'),
        ],
    )


def test_collect_failures_points_at_failed_step() -> None:
    failures = ResultAggregator().collect_failures(build_summary())

    assert failures[0]['step'] == 'click .chkAgree'
    assert failures[0]['title'] == 'navigate to Website, add items and checkout -- Navigates to Website'
    assert failures[1] == {
        'spec': 'validations/test1_spec',
        'title': None,
        'error': 'Spec execution failed: browser failed to start',
        'screenshots': [],
    }


def test_report_dir_uses_run_timestamp(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('GREENKART_TIMESTAMP', '2026-10-17_09-30-00')

    assert ResultAggregator('out').report_dir() == str(Path('out') / 'run_2026-10-17_09-30-00')


@pytest.mark.asyncio
async def test_json_report(tmp_path: Path) -> None:
    path = await ResultAggregator().generate_json_report(build_summary(), report_dir=str(tmp_path))

    data = json.loads(Path(path).read_text(encoding='utf-8'))
    assert data['base_url'] == 'https://greenkart.test/'
    assert data['summary']['failed'] == 1
    assert data['summary']['failed_specs'] == 2
    assert len(data['failures']) == 2


def test_html_report_escapes_content(tmp_path: Path) -> None:
    summary = build_summary()
    summary.specs[0].tests[0].error_message = 'expected <div class="product"> to be visible'

    path = ResultAggregator().generate_html_report(summary, report_dir=str(tmp_path))

    html = Path(path).read_text(encoding='utf-8')
    assert '&lt;div class=&#34;product&#34;&gt;' in html
    assert 'validations/test1_spec (failed)' in html
    assert 'Spec execution failed: browser failed to start' in html


def test_html_report_missing_template_returns_empty(tmp_path: Path) -> None:
    assert ResultAggregator().generate_html_report(build_summary(), report_dir=str(tmp_path), template_name='absent.j2') == ''
