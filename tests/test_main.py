"""Unit tests for the command line entrypoint."""
import io
import unittest
from unittest.mock import patch, MagicMock
import datetime
from zoneinfo import ZoneInfo
from screentime import main as cli
from screentime.models import UsageRecord
from screentime.platform import UsagePlatformBase
from screentime.services import UsageService

IST = ZoneInfo("Asia/Kolkata")


class TestMainCommands(unittest.TestCase):
    """Test report, record and argument handling with platforms mocked."""

    def setUp(self) -> None:
        self.platform = MagicMock(spec=UsagePlatformBase)
        self.platform.name = "Mock"
        self.platform.has_usage_access.return_value = True
        self.platform.get_app_label.side_effect = LookupError
        self.platform.query_usage.return_value = [
            UsageRecord("com.youtube", 5_400_000),
            UsageRecord("com.chrome", 1_800_000),
        ]

        self.detect_patcher = patch.object(cli, 'detect_platform', return_value=self.platform)
        self.stdout_patcher = patch('sys.stdout', new_callable=io.StringIO)
        self.mock_detect = self.detect_patcher.start()
        self.stdout = self.stdout_patcher.start()

    def tearDown(self) -> None:
        self.detect_patcher.stop()
        self.stdout_patcher.stop()

    def test_print_snapshot(self) -> None:
        now = datetime.datetime(2024, 3, 10, 15, 0, tzinfo=IST)
        snapshot = UsageService(self.platform, IST).get_snapshot(7, now)

        cli.print_snapshot(snapshot)

        lines = self.stdout.getvalue().splitlines()
        self.assertEqual(lines[0], "Usage Stats (7 Days, since 2024-03-04T00:00+05:30)")
        self.assertEqual(lines[1], "Total Screen Time: 2 hours, 0 minutes")
        self.assertEqual(lines[2:], [
            "  Youtube: 1 hours, 30 minutes (75%)",
            "  Chrome: 30 minutes (25%)",
        ])

    def test_print_snapshot_without_usage(self) -> None:
        self.platform.query_usage.return_value = []
        snapshot = UsageService(self.platform, IST).get_snapshot(1)

        cli.print_snapshot(snapshot)

        self.assertIn("Usage Stats (1 Day,", self.stdout.getvalue())
        self.assertIn("No app usage recorded", self.stdout.getvalue())

    def test_report_without_permission_requests_access(self) -> None:
        self.platform.has_usage_access.return_value = False

        result = cli.report(1, watch=False)

        self.assertEqual(result, 1)
        self.platform.request_usage_access.assert_called_once_with()
        self.platform.query_usage.assert_not_called()
        self.assertIn("Permission required to access screen time", self.stdout.getvalue())

    def test_report_prints_usage(self) -> None:
        result = cli.report(1, watch=False)

        self.assertEqual(result, 0)
        self.assertIn("Total Screen Time: 2 hours, 0 minutes", self.stdout.getvalue())

    @patch.object(cli, 'MidnightRefresher')
    def test_report_watch_stops_refresher_on_interrupt(self, mock_refresher_cls: MagicMock) -> None:
        with patch.object(cli.threading, 'Event') as mock_event:
            mock_event.return_value.wait.side_effect = KeyboardInterrupt

            result = cli.report(7, watch=True)

        self.assertEqual(result, 0)
        refresher = mock_refresher_cls.return_value
        self.assertEqual(mock_refresher_cls.call_args[0][1], 7)
        refresher.start.assert_called_once_with()
        refresher.stop.assert_called_once_with()

    @patch.object(cli, 'ensure_db_exists')
    @patch.object(cli, 'UsageRepository')
    @patch.object(cli, 'AdbPlatform')
    def test_record_stores_device_buckets(self, mock_adb_cls: MagicMock, mock_repo: MagicMock,
                                          mock_ensure_db: MagicMock) -> None:
        adb = mock_adb_cls.return_value
        adb.has_usage_access.return_value = True
        records = [UsageRecord("com.youtube", 1000, 0, 86_400_000)]
        adb.query_usage.return_value = records
        mock_repo.replace_snapshot.return_value = 1

        result = cli.record()

        self.assertEqual(result, 0)
        mock_ensure_db.assert_called_once_with()
        mock_repo.replace_snapshot.assert_called_once_with(records)
        self.assertIn("Recorded 1 usage buckets", self.stdout.getvalue())

    @patch.object(cli, 'UsageRepository')
    @patch.object(cli, 'AdbPlatform')
    def test_record_without_device(self, mock_adb_cls: MagicMock, mock_repo: MagicMock) -> None:
        mock_adb_cls.return_value.has_usage_access.return_value = False

        self.assertEqual(cli.record(), 1)
        mock_repo.replace_snapshot.assert_not_called()

    @patch.object(cli, 'report', return_value=0)
    def test_main_parses_days(self, mock_report: MagicMock) -> None:
        self.assertEqual(cli.main(["report", "--days", "10", "--watch"]), 0)

        mock_report.assert_called_once_with(10, True)

    @patch.object(cli, 'report', return_value=0)
    def test_main_rejects_unknown_range(self, mock_report: MagicMock) -> None:
        with patch('sys.stderr', new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--days", "3"])

        self.assertEqual(ctx.exception.code, 2)
        mock_report.assert_not_called()

    @patch.object(cli, 'record', return_value=0)
    def test_main_record_command(self, mock_record: MagicMock) -> None:
        self.assertEqual(cli.main(["record"]), 0)

        mock_record.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
