import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from minimal_ultrasonic import SimulatedGPIO, Unit
from minimal_ultrasonic import ultra_test


def run(*argv):
    out = io.StringIO()
    with redirect_stdout(out):
        code = ultra_test.main(list(argv))
    return code, out.getvalue().splitlines()


class TestUltraTest(unittest.TestCase):
    def test_mock_readings(self):
        code, lines = run('--mock', '--count', '3', '--interval', '0')
        self.assertEqual(code, 0)
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[0], 'front: 35.0 cm (mock)')
        for line in lines:
            self.assertTrue(line.startswith('front: '))
            self.assertTrue(line.endswith(' cm (mock)'))

    def test_falls_back_to_mock_without_rpi_gpio(self):
        with mock.patch.object(ultra_test, 'HAS_GPIO', False):
            _, lines = run('--count', '1', '--interval', '0')
        self.assertTrue(lines[0].startswith('WARN: '))
        self.assertIn('mock mode', lines[0])
        self.assertTrue(lines[1].endswith('(mock)'))

    def test_unit_and_pins(self):
        _, lines = run('--mock', '--signal', '17', '--unit', 'in', '--count', '1', '--interval', '0')
        self.assertEqual(lines, ['sig17: 13.8 in (mock)'])

    def test_short_max_distance_reports_no_echo(self):
        _, lines = run('--mock', '--max-distance', '10', '--count', '2', '--interval', '0')
        self.assertEqual(lines, ['front: no echo (mock)'] * 2)

    def test_hardware_path_cleans_up(self):
        bench = SimulatedGPIO(echo_delay_us=None)
        with mock.patch.object(ultra_test, 'HAS_GPIO', True), \
                mock.patch.object(ultra_test, 'RPiGPIO', return_value=bench):
            _, lines = run('--sensor', 'right', '--count', '1', '--interval', '0')
        self.assertIn('Testing sensor "right"', lines[0])
        self.assertEqual(lines[1], 'right: no echo')
        self.assertEqual(bench.modes[23], 'out')
        self.assertTrue(bench.cleaned_up)

    def test_resolve_pins(self):
        parser = ultra_test.build_parser()
        self.assertEqual(ultra_test.resolve_pins(parser.parse_args([])), ('front', 15, 14))
        self.assertEqual(ultra_test.resolve_pins(parser.parse_args(['--trig', '5', '--echo', '6'])),
                         ('trig5', 5, 6))
        with self.assertRaises(SystemExit):
            ultra_test.resolve_pins(parser.parse_args(['--trig', '5']))
        with self.assertRaises(SystemExit):
            ultra_test.resolve_pins(parser.parse_args(['--echo', '6']))

    def test_format_reading(self):
        self.assertEqual(ultra_test.format_reading('front', 0.0, Unit.CM), 'front: no echo')
        self.assertEqual(ultra_test.format_reading('front', 12.345, Unit.MM), 'front: 12.3 mm')


if __name__ == '__main__':
    unittest.main()
