"""Unit tests for report descriptor parsing."""

import unittest

from glowusb.device.descriptor import DescriptorError, parse_report_lengths

from fake_backend import VENDOR_64

# Two input reports with IDs, the longer one wins
WITH_REPORT_IDS = bytes([
    0x06, 0x00, 0xFF,
    0x09, 0x01,
    0xA1, 0x01,
    0x85, 0x01,        #   Report ID (1)
    0x75, 0x08,
    0x95, 0x08,        #   Report Count (8)
    0x81, 0x02,        #   Input
    0x85, 0x02,        #   Report ID (2)
    0x95, 0x10,        #   Report Count (16)
    0x81, 0x02,        #   Input
    0x75, 0x01,        #   Report Size (1)
    0x95, 0x04,        #   Report Count (4)
    0x81, 0x02,        #   Input (4 bits)
    0x75, 0x08,
    0x95, 0x04,
    0x91, 0x02,        #   Output (report 2, 4 bytes)
    0xC0,
])


class TestParseReportLengths(unittest.TestCase):

    def test_vendor_descriptor(self):
        caps = parse_report_lengths(VENDOR_64)

        self.assertEqual(caps.input_report_length, 65)
        self.assertEqual(caps.output_report_length, 65)
        self.assertEqual(caps.feature_report_length, 0)

    def test_report_ids_longest_wins(self):
        caps = parse_report_lengths(WITH_REPORT_IDS)

        # 16 bytes + 4 bits rounds up to 17, plus report ID
        self.assertEqual(caps.input_report_length, 18)
        self.assertEqual(caps.output_report_length, 5)

    def test_push_pop(self):
        descriptor = bytes([
            0x75, 0x08,        # Report Size (8)
            0x95, 0x02,        # Report Count (2)
            0xA4,              # Push
            0x95, 0x10,        # Report Count (16)
            0x91, 0x02,        # Output: 16 bytes
            0xB4,              # Pop
            0x81, 0x02,        # Input: 2 bytes
        ])
        caps = parse_report_lengths(descriptor)

        self.assertEqual(caps.output_report_length, 17)
        self.assertEqual(caps.input_report_length, 3)

    def test_long_item_skipped(self):
        descriptor = bytes([0xFE, 0x02, 0x10, 0xAA, 0xBB]) + VENDOR_64
        self.assertEqual(parse_report_lengths(descriptor).input_report_length, 65)

    def test_four_byte_item(self):
        descriptor = bytes([
            0x27, 0xFF, 0xFF, 0x00, 0x00,  # Logical Maximum (65535), 4-byte data
            0x75, 0x10,                    # Report Size (16)
            0x95, 0x01,
            0x81, 0x02,
        ])
        self.assertEqual(parse_report_lengths(descriptor).input_report_length, 3)

    def test_empty_descriptor(self):
        caps = parse_report_lengths(b"")
        self.assertEqual(caps.input_report_length, 0)
        self.assertEqual(caps.output_report_length, 0)

    def test_truncated_item(self):
        with self.assertRaises(DescriptorError):
            parse_report_lengths(bytes([0x06, 0x00]))

    def test_pop_without_push(self):
        with self.assertRaises(DescriptorError):
            parse_report_lengths(bytes([0xB4]))


if __name__ == '__main__':
    unittest.main()
