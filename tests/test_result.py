import unittest

import numpy as np

import gmpest as gm
import gmpest.num as gnp
from gmpest.misc.dataframe import DataFrame
from gmpest.misc.gmpe import FictitiousDepthGMPE
from gmpest.misc.synthetic import simulate_dataset


class TestEstimationResult(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        gmpe = FictitiousDepthGMPE()
        data = simulate_dataset(
            gmpe, [1.0, 1.0, -1.0, 0.1], [10.0], [0.3, 0.3],
            covariance_type="No", num_events=15, stations_per_event=10, seed=3,
        )
        cls.result = gm.estimate(
            data.y, data.x, data.w, data.event_id, gmpe,
            [8.0], [0.25, 0.25], covariance_type="No", confidence_level=90.0,
        )

    def test_as_dict(self):
        d = self.result.as_dict()
        self.assertEqual(
            set(d),
            {"LogLikelihood", "ParameterEstimates", "StandardError", "ConfidenceInterval", "InformationCriteria"},
        )
        self.assertEqual(set(d["ParameterEstimates"]), {"beta", "gamma", "theta"})
        self.assertEqual(set(d["InformationCriteria"]), {"AIC", "BIC"})
        self.assertAlmostEqual(d["LogLikelihood"], self.result.log_likelihood)

    def test_summary(self):
        table = self.result.summary()
        self.assertIsInstance(table, DataFrame)
        self.assertEqual(table.shape, (7, 4))
        self.assertEqual(
            self.result.rownames(), ["beta0", "beta1", "beta2", "beta3", "gamma0", "tau2", "sigma2"]
        )
        self.assertEqual(table.colnames[2], "90% low")
        self.assertAlmostEqual(table["tau2", "estimate"], self.result.estimates.theta[0])
        self.assertIn("AIC", str(self.result))
        self.assertIn("sigma2", str(self.result))

    def test_stacked(self):
        est = self.result.estimates.stacked()
        self.assertEqual(est.shape, (7,))
        self.assertTrue(gnp.all(est[-2:] > 0.0))


class TestDataFrame(unittest.TestCase):
    def test_indexing(self):
        df = DataFrame(np.array([[1.0, 2.0], [3.0, np.nan]]), ["a", "b"], ["x", "y"])
        self.assertEqual(df.shape, (2, 2))
        self.assertEqual(df["y", "a"], 3.0)
        self.assertIn("NaN", repr(df))
        self.assertEqual(df.to_dict()["x"]["b"], 2.0)

    def test_bad_shape(self):
        with self.assertRaises(ValueError):
            DataFrame(np.zeros((2, 3)), ["a", "b"], ["x", "y"])


if __name__ == "__main__":
    unittest.main()
