# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

import unittest
from test.unit.utils.base import BaseTestCase

import pandas as pd

from nbmstat.distributions.cumulative import CumulativeDistribution
from nbmstat.distributions.probability import PDFPoint, ProbabilityDistribution
from nbmstat.distributions.scenarios import (
    Scenario,
    create_scenarios_from_pdfs,
    find_scenarios,
    search_scenarios,
    search_scenarios_for_pdfs,
    walk_extrema,
)


def unit_width_pdf(densities) -> ProbabilityDistribution:
    return ProbabilityDistribution(
        PDFPoint(float(i), float(i + 1), float(d)) for i, d in enumerate(densities)
    ).normalized()


class TestWalkExtrema(BaseTestCase):
    def test_single_interval(self):
        pdf = ProbabilityDistribution([PDFPoint(2.0, 4.0, 0.5)])

        scenarios = walk_extrema(pdf)

        self.assertEqual(scenarios, [Scenario(2.0, 4.0, 3.0, 1.0)])

    def test_point_mass(self):
        cdf = CumulativeDistribution([(10, 5), (90, 5)])
        pdf = ProbabilityDistribution.from_cdf(cdf)

        scenarios = walk_extrema(pdf)

        self.assertEqual(scenarios, [Scenario(5.0, 5.0, 5.0, 1.0)])

    def test_two_modes_sorted_by_probability(self):
        pdf = unit_width_pdf([1, 2, 1, 1, 4, 1])

        scenarios = walk_extrema(pdf)

        self.assertEqual(len(scenarios), 2)
        most_likely, least_likely = scenarios
        self.assertEqual(most_likely.minimum, 3.0)
        self.assertEqual(most_likely.maximum, 6.0)
        self.assertEqual(most_likely.mode, 4.5)
        self.assertAlmostEqual(most_likely.probability, 0.6)
        self.assertEqual(least_likely.minimum, 0.0)
        self.assertEqual(least_likely.maximum, 3.0)
        self.assertEqual(least_likely.mode, 1.5)
        self.assertAlmostEqual(least_likely.probability, 0.4)

    def test_starting_at_maximum(self):
        pdf = unit_width_pdf([3, 2, 1])

        scenarios = walk_extrema(pdf)

        self.assertEqual(len(scenarios), 1)
        self.assertEqual(scenarios[0].mode, 0.5)
        self.assertAlmostEqual(scenarios[0].probability, 1.0)

    def test_rising_density_uses_last_center_as_mode(self):
        pdf = unit_width_pdf([1, 2, 3])

        scenarios = walk_extrema(pdf)

        self.assertEqual(len(scenarios), 1)
        self.assertEqual(scenarios[0].mode, 2.5)
        self.assertEqual(scenarios[0].minimum, 0.0)
        self.assertEqual(scenarios[0].maximum, 3.0)

    def test_ties_count_as_rising(self):
        pdf = unit_width_pdf([1, 1, 1, 1])

        scenarios = walk_extrema(pdf)

        self.assertEqual(len(scenarios), 1)
        self.assertEqual(scenarios[0].mode, 3.5)

    def test_probabilities_sum_to_one(self):
        pdf = unit_width_pdf([1, 5, 2, 6, 1, 3, 1, 4, 2])

        scenarios = walk_extrema(pdf)

        self.assertEqual(len(scenarios), 4)
        self.assertAlmostEqual(sum(sc.probability for sc in scenarios), 1.0)
        probabilities = [sc.probability for sc in scenarios]
        self.assertEqual(probabilities, sorted(probabilities, reverse=True))

    def test_large_radius_gives_single_scenario(self):
        pdf = unit_width_pdf([1, 5] * 10)

        scenarios = walk_extrema(pdf.smooth(1000.0))

        self.assertLessEqual(len(scenarios), 1)


class TestFindScenarios(BaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.many_modes = unit_width_pdf([1, 5] * 10)

    def test_find_scenarios_converges(self):
        scenarios = find_scenarios(self.many_modes, 0.1, 2.0)

        self.assertLessEqual(len(scenarios), 4)
        self.assertGreaterEqual(len(scenarios), 1)
        self.assertAlmostEqual(sum(sc.probability for sc in scenarios), 1.0)

    def test_search_scenarios_returns_smoothed_pdf(self):
        result = search_scenarios(self.many_modes, 0.1, 2.0)

        self.assertTrue(result.converged)
        self.assertGreater(result.iterations, 1)
        self.assertAlmostEqual(result.radius, 0.1 + 2.0 * (result.iterations - 1))
        self.assertEqual(result.scenarios, walk_extrema(result.pdf))
        # The input is left alone
        self.assertAlmostEqual(self.many_modes.densities()[1], 5 / 60)

    def test_search_scenarios_truncates_without_convergence(self):
        result = search_scenarios(
            self.many_modes, 0.01, 0.01, max_scenarios=4, max_iterations=1
        )

        self.assertFalse(result.converged)
        self.assertEqual(len(result.scenarios), 4)
        self.assertAlmostEqual(sum(sc.probability for sc in result.scenarios), 1.0)

    def test_find_scenarios_single_interval(self):
        pdf = ProbabilityDistribution([PDFPoint(0.0, 1.0, 1.0)])

        scenarios = find_scenarios(pdf, 1.0, 2.0)

        self.assertEqual(len(scenarios), 1)
        self.assertAlmostEqual(scenarios[0].probability, 1.0)

    def test_radii_must_be_positive(self):
        with self.assertRaises(ValueError):
            find_scenarios(self.many_modes, 0.0, 1.0)
        with self.assertRaises(ValueError):
            find_scenarios(self.many_modes, 1.0, -1.0)

    def test_scenario_limits_must_be_positive(self):
        with self.assertRaises(ValueError):
            search_scenarios(self.many_modes, 0.01, 0.01, max_iterations=0)
        with self.assertRaises(ValueError):
            search_scenarios(self.many_modes, 0.01, 0.01, max_scenarios=0)

    def test_single_iteration_is_allowed(self):
        result = search_scenarios(
            self.many_modes, 100.0, 1.0, max_scenarios=1, max_iterations=1
        )

        self.assertTrue(result.converged)
        self.assertEqual(result.iterations, 1)
        self.assertEqual(len(result.scenarios), 1)

    def test_as_tuple(self):
        scenario = Scenario(minimum=1.0, maximum=3.0, mode=2.0, probability=0.5)

        self.assertEqual(scenario.as_tuple(), (1.0, 2.0, 3.0, 0.5))

    def test_create_scenarios_from_pdfs(self):
        times = pd.date_range("2024-01-01", periods=2, freq="D", tz="UTC")
        pdfs = {times[0]: self.many_modes, times[1]: unit_width_pdf([1, 2, 1])}

        scenarios = create_scenarios_from_pdfs(pdfs, 1.0, 2.0)

        self.assertEqual(list(scenarios.keys()), list(pdfs.keys()))
        for scenario_list in scenarios.values():
            self.assertLessEqual(len(scenario_list), 4)
            self.assertAlmostEqual(
                sum(sc.probability for sc in scenario_list), 1.0
            )

    def test_search_scenarios_for_pdfs_skips_failing_valid_times(self):
        times = pd.date_range("2024-01-01", periods=2, freq="D", tz="UTC")
        pdfs = {
            times[0]: ProbabilityDistribution([]),
            times[1]: self.many_modes,
        }

        results = search_scenarios_for_pdfs(pdfs, 1.0, 2.0)

        self.assertEqual(list(results.keys()), [times[1]])
        result = results[times[1]]
        self.assertEqual(result.scenarios, walk_extrema(result.pdf))
        self.assertEqual(
            create_scenarios_from_pdfs(pdfs, 1.0, 2.0), {times[1]: result.scenarios}
        )


if __name__ == "__main__":
    unittest.main()
