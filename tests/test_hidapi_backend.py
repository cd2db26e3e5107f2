"""Unit tests for HidapiBackend (hidapi is mocked)."""

import unittest
from unittest.mock import MagicMock, patch

from glowusb.device.backend import MODE_READ, MODE_WRITE
from glowusb.device.hidapi_backend import HidapiBackend
from glowusb.errors import HidIOError

from fake_backend import VENDOR_64


class TestHidapiEnumerate(unittest.TestCase):

    @patch('glowusb.device.hidapi_backend.hid')
    def test_enumerate_converts_entries(self, mock_hid):
        mock_hid.enumerate.return_value = [
            {
                'path': b'/dev/hidraw3',
                'vendor_id': 0x1234,
                'product_id': 0x5678,
                'serial_number': '',
                'manufacturer_string': 'ledmaker.org',
                'product_string': 'Glow Controller',
                'interface_number': 0,
            },
        ]

        devices = list(HidapiBackend().enumerate())

        self.assertEqual(len(devices), 1)
        info = devices[0]
        self.assertEqual(info.vendor_id, 0x1234)
        self.assertEqual(info.product_id, 0x5678)
        self.assertEqual(info.path, b'/dev/hidraw3')
        self.assertEqual(info.manufacturer, 'ledmaker.org')
        self.assertEqual(info.product, 'Glow Controller')
        self.assertIsNone(info.serial_number)
        self.assertEqual(info.usb_id, '1234:5678')

    @patch('glowusb.device.hidapi_backend.hid')
    def test_enumerate_is_lazy(self, mock_hid):
        mock_hid.enumerate.return_value = []
        devices = HidapiBackend().enumerate()
        mock_hid.enumerate.assert_not_called()
        self.assertEqual(list(devices), [])
        mock_hid.enumerate.assert_called_once()


class TestHidapiOpen(unittest.TestCase):

    @patch('glowusb.device.hidapi_backend.hid')
    def test_open_path(self, mock_hid):
        mock_device = MagicMock()
        mock_hid.device.return_value = mock_device

        handle = HidapiBackend().open(b'/dev/hidraw3', MODE_READ)

        self.assertIs(handle, mock_device)
        mock_device.open_path.assert_called_once_with(b'/dev/hidraw3')

    @patch('glowusb.device.hidapi_backend.hid')
    def test_open_failure(self, mock_hid):
        mock_hid.device.return_value.open_path.side_effect = OSError("open failed")

        with self.assertRaises(HidIOError):
            HidapiBackend().open(b'/dev/hidraw3', MODE_WRITE)

    def test_open_unknown_mode(self):
        with self.assertRaises(ValueError):
            HidapiBackend().open(b'/dev/hidraw3', "rw")

    def test_close_error_logged(self):
        handle = MagicMock()
        handle.close.side_effect = OSError("gone")
        with self.assertLogs('glowusb.device.hidapi_backend', level='WARNING'):
            HidapiBackend().close(handle)


class TestHidapiCapabilities(unittest.TestCase):

    def test_capabilities_from_descriptor(self):
        handle = MagicMock()
        handle.get_report_descriptor.return_value = list(VENDOR_64)

        caps = HidapiBackend().query_capabilities(handle)

        self.assertEqual(caps.input_report_length, 65)
        self.assertEqual(caps.output_report_length, 65)

    def test_descriptor_read_failure(self):
        handle = MagicMock()
        handle.get_report_descriptor.side_effect = OSError("not supported")

        with self.assertRaises(HidIOError):
            HidapiBackend().query_capabilities(handle)

    def test_no_output_report(self):
        handle = MagicMock()
        handle.get_report_descriptor.return_value = [
            0x75, 0x08, 0x95, 0x08, 0x81, 0x02,  # input only
        ]

        with self.assertRaises(HidIOError):
            HidapiBackend().query_capabilities(handle)

    def test_truncated_descriptor(self):
        handle = MagicMock()
        handle.get_report_descriptor.return_value = [0x06, 0x00]

        with self.assertRaises(HidIOError):
            HidapiBackend().query_capabilities(handle)


class TestHidapiReportIO(unittest.TestCase):

    def test_write_report(self):
        handle = MagicMock()
        handle.write.return_value = 5

        HidapiBackend().write_report(handle, b'\x00\x01\x02\x03\x04')

        handle.write.assert_called_once_with(b'\x00\x01\x02\x03\x04')

    def test_write_failure_return_code(self):
        handle = MagicMock()
        handle.write.return_value = -1
        handle.error.return_value = "pipe error"

        with self.assertRaises(HidIOError):
            HidapiBackend().write_report(handle, b'\x00\x01')

    def test_write_exception(self):
        handle = MagicMock()
        handle.write.side_effect = ValueError("not open")

        with self.assertRaises(HidIOError):
            HidapiBackend().write_report(handle, b'\x00\x01')

    def test_read_report(self):
        handle = MagicMock()
        handle.get_input_report.return_value = [0, 0, 1, 0, 0]

        report = HidapiBackend().read_report(handle, 5)

        self.assertEqual(report, bytes([0, 0, 1, 0, 0]))
        handle.get_input_report.assert_called_once_with(0, 5)

    def test_read_failure(self):
        handle = MagicMock()
        handle.get_input_report.side_effect = OSError("timeout")

        with self.assertRaises(HidIOError):
            HidapiBackend().read_report(handle, 5)

    def test_read_empty(self):
        handle = MagicMock()
        handle.get_input_report.return_value = []

        with self.assertRaises(HidIOError):
            HidapiBackend().read_report(handle, 5)


if __name__ == '__main__':
    unittest.main()
