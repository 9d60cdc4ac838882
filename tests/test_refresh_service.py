"""Unit tests for the midnight refresher."""
import unittest
from unittest.mock import patch, MagicMock
from zoneinfo import ZoneInfo
from screentime.services import refresh_service
from screentime.services.refresh_service import MidnightRefresher

IST = ZoneInfo("Asia/Kolkata")


class TestMidnightRefresher(unittest.TestCase):
    """Test scheduling and cancellation."""

    def setUp(self) -> None:
        self.timer_patcher = patch.object(refresh_service.threading, 'Timer')
        self.delay_patcher = patch.object(refresh_service, 'seconds_until_next_midnight', return_value=120.0)
        self.mock_timer_cls = self.timer_patcher.start()
        self.mock_delay = self.delay_patcher.start()
        self.timer_instance = self.mock_timer_cls.return_value

        self.service = MagicMock()
        self.service.tz = IST
        self.callback = MagicMock()
        self.refresher = MidnightRefresher(self.service, 1, self.callback)

    def tearDown(self) -> None:
        self.timer_patcher.stop()
        self.delay_patcher.stop()

    def test_start_refreshes_and_schedules_midnight(self) -> None:
        self.refresher.start()

        self.service.get_snapshot.assert_called_once_with(1)
        self.callback.assert_called_once_with(self.service.get_snapshot.return_value)
        self.mock_timer_cls.assert_called_once_with(120.0, self.refresher.refresh)
        self.timer_instance.start.assert_called_once_with()

    def test_timer_firing_reschedules(self) -> None:
        self.refresher.start()
        self.refresher.refresh()

        self.assertEqual(self.service.get_snapshot.call_count, 2)
        self.assertEqual(self.mock_timer_cls.call_count, 2)
        self.timer_instance.cancel.assert_called_once_with()

    def test_stop_cancels_and_blocks_further_refresh(self) -> None:
        self.refresher.start()
        self.refresher.stop()
        self.refresher.refresh()

        self.timer_instance.cancel.assert_called_once_with()
        self.assertIsNone(self.refresher.timer)
        self.assertEqual(self.service.get_snapshot.call_count, 1)

    def test_set_days_refreshes_with_new_range(self) -> None:
        self.refresher.start()
        self.refresher.set_days(7)

        self.service.get_window.assert_called_with(7)
        self.service.get_snapshot.assert_called_with(7)

    def test_set_days_before_start_does_not_refresh(self) -> None:
        self.refresher.set_days(10)

        self.assertEqual(self.refresher.days, 10)
        self.service.get_snapshot.assert_not_called()

    @patch('builtins.print')
    def test_failed_refresh_still_schedules_next_midnight(self, mock_print: MagicMock) -> None:
        """A device unplugged at midnight must not end the refresh loop."""
        self.service.get_snapshot.side_effect = [RuntimeError("ADB shell command timed out."), MagicMock()]

        self.refresher.start()

        self.callback.assert_not_called()
        self.mock_timer_cls.assert_called_once_with(120.0, self.refresher.refresh)
        self.timer_instance.start.assert_called_once_with()
        self.assertIsNotNone(self.refresher.timer)
        mock_print.assert_called_once()

        # Next midnight succeeds again
        self.refresher.refresh()

        self.callback.assert_called_once()
        self.assertEqual(self.mock_timer_cls.call_count, 2)

    @patch('builtins.print')
    def test_failing_callback_still_schedules_next_midnight(self, mock_print: MagicMock) -> None:
        self.callback.side_effect = ValueError("display closed")

        self.refresher.start()

        self.mock_timer_cls.assert_called_once()
        self.assertIsNotNone(self.refresher.timer)

    def test_callback_may_stop_refresher(self) -> None:
        self.callback.side_effect = lambda snapshot: self.refresher.stop()

        self.refresher.start()

        self.assertFalse(self.refresher.running)
        self.assertIsNone(self.refresher.timer)
        self.timer_instance.cancel.assert_called_once_with()

    def test_callback_may_change_range(self) -> None:
        calls = []

        def switch_once(snapshot: MagicMock) -> None:
            calls.append(self.refresher.days)
            if len(calls) == 1:
                self.refresher.set_days(7)

        self.callback.side_effect = switch_once

        self.refresher.start()

        self.assertEqual(calls, [1, 7])
        self.service.get_snapshot.assert_called_with(7)


if __name__ == "__main__":
    unittest.main()
