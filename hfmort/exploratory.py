import logging
from dataclasses import dataclass

import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf

from hfmort.constants import OUTCOME_RAW
from hfmort.datasets import validate_columns

logger = logging.getLogger(__name__)


@dataclass
class ExploratoryFit:
    formula: str
    result: object
    coefficients: pd.DataFrame

    @property
    def aic(self) -> float:
        return float(self.result.aic)


def fit_exploratory_glm(df: pd.DataFrame, outcome: str = OUTCOME_RAW) -> ExploratoryFit:
    """Binomial GLM of the outcome on every other column.

    Diagnostic only: used to eyeball which predictors carry signal before
    the reduced feature set is chosen.
    """
    validate_columns(df, [outcome])
    predictors = [c for c in df.columns if c != outcome]
    formula = f"{outcome} ~ " + " + ".join(predictors)
    result = smf.glm(formula, data=df, family=sm.families.Binomial()).fit()
    coefficients = pd.DataFrame(
        {
            "term": result.params.index,
            "estimate": result.params.values,
            "std_error": result.bse.values,
            "statistic": result.tvalues.values,
            "p_value": result.pvalues.values,
        }
    )
    logger.info(f"Exploratory GLM on {len(predictors)} predictors, AIC={result.aic:.1f}")
    return ExploratoryFit(formula=formula, result=result, coefficients=coefficients)
