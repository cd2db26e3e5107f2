"""Unit tests for the packet codec."""

import unittest

from glowusb.errors import InvalidPacketSize, MalformedPayload
from glowusb.protocol.codec import chunk, make_break_packet, parse_packets, parse_tokens


class TestParseTokens(unittest.TestCase):
    """Tests for hex token parsing."""

    def test_comma_separated(self):
        self.assertEqual(parse_tokens("FF,00,AA,BB"), [0xFF, 0x00, 0xAA, 0xBB])

    def test_mixed_separators(self):
        """Commas, spaces and line breaks may be mixed and repeated."""
        text = "01, 02 03\r\n04\n\n05,,06\t07"
        self.assertEqual(parse_tokens(text), [1, 2, 3, 4, 5, 6, 7])

    def test_lowercase_and_prefix(self):
        self.assertEqual(parse_tokens("ff 0x0A a"), [255, 10, 10])

    def test_empty_blob(self):
        self.assertEqual(parse_tokens(""), [])
        self.assertEqual(parse_tokens(" ,\n "), [])

    def test_bad_token(self):
        with self.assertRaises(MalformedPayload) as ctx:
            parse_tokens("FF,ZZ,00")
        self.assertEqual(ctx.exception.token, "ZZ")
        self.assertEqual(ctx.exception.index, 1)

    def test_non_hex_literals_rejected(self):
        """Signs, underscores, non-ASCII digits and bare prefixes are not hex bytes."""
        for token in ("F_F", "-0", "+1", "\u0663", "0x_1", "0x"):
            with self.subTest(token=token):
                with self.assertRaises(MalformedPayload) as ctx:
                    parse_tokens(f"00 {token}")
                self.assertEqual(ctx.exception.token, token)
                self.assertEqual(ctx.exception.index, 1)

    def test_leading_zeros_accepted(self):
        self.assertEqual(parse_tokens("0FF 0x0001"), [255, 1])

    def test_token_too_large(self):
        with self.assertRaises(MalformedPayload):
            parse_tokens("100")

    def test_malformed_payload_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_tokens("G1")


class TestChunk(unittest.TestCase):
    """Tests for grouping tokens into packets."""

    def test_exact_multiple(self):
        packets = chunk([0xFF, 0x00, 0xAA, 0xBB], 2)
        self.assertEqual(packets, [bytes([0xFF, 0x00]), bytes([0xAA, 0xBB])])

    def test_trailing_remainder_dropped(self):
        packets = chunk([0xFF, 0x00, 0xAA, 0xBB], 3)
        self.assertEqual(packets, [bytes([0xFF, 0x00, 0xAA])])

    def test_all_packets_have_packet_size(self):
        tokens = list(range(50))
        for size in range(1, 12):
            packets = chunk(tokens, size)
            self.assertEqual(len(packets), len(tokens) // size)
            self.assertTrue(all(len(p) == size for p in packets))

    def test_one_short_of_multiple_drops_tail(self):
        size = 4
        tokens = list(range(3 * size - 1))
        packets = chunk(tokens, size)
        self.assertEqual(len(packets), 2)
        self.assertEqual(b"".join(packets), bytes(tokens[:2 * size]))

    def test_order_preserved(self):
        packets = chunk([1, 2, 3, 4, 5, 6], 2)
        self.assertEqual(b"".join(packets), bytes([1, 2, 3, 4, 5, 6]))

    def test_fewer_tokens_than_packet(self):
        self.assertEqual(chunk([1, 2], 3), [])

    def test_packets_are_immutable(self):
        packet = chunk([1, 2], 2)[0]
        self.assertIsInstance(packet, bytes)

    def test_invalid_packet_size(self):
        for size in (0, -1):
            with self.assertRaises(InvalidPacketSize):
                chunk([1, 2, 3], size)

    def test_values_out_of_byte_range(self):
        with self.assertRaises(MalformedPayload):
            chunk([1, 256], 2)


class TestParsePackets(unittest.TestCase):

    def test_round_trip_blob(self):
        self.assertEqual(
            parse_packets("FF,00,AA,BB", 2),
            [b"\xff\x00", b"\xaa\xbb"],
        )

    def test_dropped_bytes_logged(self):
        with self.assertLogs("glowusb.protocol.codec", level="WARNING") as logs:
            packets = parse_packets("FF,00,AA,BB", 3)
        self.assertEqual(packets, [b"\xff\x00\xaa"])
        self.assertIn("Dropping 1 trailing byte", logs.output[0])

    def test_bad_token_fails_before_chunking(self):
        with self.assertRaises(MalformedPayload):
            parse_packets("FF,00,XX", 0)


class TestBreakPacket(unittest.TestCase):

    def test_all_ff(self):
        self.assertEqual(make_break_packet(4), b"\xff\xff\xff\xff")

    def test_invalid_size(self):
        with self.assertRaises(InvalidPacketSize):
            make_break_packet(0)


if __name__ == '__main__':
    unittest.main()
