"""
Band tables for the calculators that classify a headline number.

Lower bounds are inclusive: a value equal to a threshold falls in the band
that starts there.
"""

import dataclasses
from typing import Dict

from calccore.calculations.bands import Band, BandTable, Classification, classify


SWEAT_RATE = BandTable(
    floor=Band(
        label="Low Sweat Rate",
        color_tag="blue",
        interpretation="Low sweat rate indicates good hydration status and efficient thermoregulation.",
        recommendations=[
            "Maintain current hydration practices",
            "Continue regular fluid intake",
            "Monitor during longer exercise sessions",
        ],
    ),
    bands=[
        Band(
            label="Moderate Sweat Rate",
            lower_bound=500,
            color_tag="green",
            interpretation="Moderate sweat rate is normal for most exercise conditions.",
            recommendations=[
                "Drink 150-250ml every 15-20 minutes during exercise",
                "Replace fluids within 2 hours post-exercise",
            ],
        ),
        Band(
            label="High Sweat Rate",
            lower_bound=1000,
            color_tag="yellow",
            interpretation="High sweat rate requires careful hydration management to prevent dehydration.",
            recommendations=[
                "Increase fluid intake to 250-400ml every 15-20 minutes",
                "Include electrolyte replacement drinks",
            ],
        ),
        Band(
            label="Very High Sweat Rate",
            lower_bound=1500,
            color_tag="red",
            interpretation="Very high sweat rate poses significant dehydration risk.",
            recommendations=[
                "Drink 400-600ml every 15-20 minutes",
                "Include sodium and electrolyte replacement",
                "Monitor for heat illness symptoms",
            ],
        ),
    ],
)

_METABOLIC_BASE = [
    "Focus on weight loss if overweight: aim for 5-10% weight loss",
    "Increase physical activity: 150+ minutes/week moderate exercise",
]

METABOLIC_SYNDROME = BandTable(
    floor=Band(
        label="No Metabolic Syndrome",
        color_tag="green",
        interpretation="You do not meet the criteria for metabolic syndrome.",
        recommendations=_METABOLIC_BASE + ["Continue maintaining healthy lifestyle habits"],
    ),
    bands=[
        Band(
            label="Metabolic Syndrome",
            lower_bound=3,
            color_tag="yellow",
            interpretation="You meet the criteria for metabolic syndrome.",
            recommendations=_METABOLIC_BASE
            + ["Discuss with healthcare provider for monitoring and potential treatment"],
        ),
        Band(
            label="Severe Metabolic Syndrome",
            lower_bound=4,
            color_tag="orange",
            interpretation="You have multiple metabolic risk factors.",
            recommendations=_METABOLIC_BASE
            + ["Seek medical evaluation promptly for comprehensive assessment"],
        ),
        Band(
            label="Very Severe Metabolic Syndrome",
            lower_bound=5,
            color_tag="red",
            interpretation="Most criteria are present. Urgent medical evaluation is needed.",
            recommendations=_METABOLIC_BASE
            + ["Seek medical evaluation promptly for comprehensive assessment"],
        ),
    ],
)

# Blood pressure stages share labels so systolic and diastolic can be ranked together
_NORMAL_BP = Band(
    label="Normal",
    color_tag="green",
    interpretation="Low risk",
    recommendations=["Maintain healthy lifestyle", "Regular monitoring"],
)
_ELEVATED_BP = dict(
    label="Elevated",
    color_tag="yellow",
    interpretation="Low-Moderate risk",
    recommendations=["Lifestyle modifications", "Regular monitoring", "Consider DASH diet"],
)
_STAGE_1 = dict(
    label="Stage 1 Hypertension",
    color_tag="orange",
    interpretation="Moderate risk",
    recommendations=["Lifestyle modifications", "Consider medication", "Regular monitoring"],
)
_STAGE_2 = dict(
    label="Stage 2 Hypertension",
    color_tag="red",
    interpretation="High risk",
    recommendations=["Medication likely needed", "Lifestyle modifications", "Regular monitoring"],
)
_STAGE_3 = dict(
    label="Stage 3 Hypertension (Hypertensive Crisis)",
    color_tag="darkred",
    interpretation="Very High risk",
    recommendations=["Immediate medical attention", "Medication required", "Lifestyle modifications"],
)

SYSTOLIC_BP = BandTable(
    floor=_NORMAL_BP,
    bands=[
        Band(lower_bound=120, **_ELEVATED_BP),
        Band(lower_bound=130, **_STAGE_1),
        Band(lower_bound=140, **_STAGE_2),
        Band(lower_bound=160, **_STAGE_3),
    ],
)

DIASTOLIC_BP = BandTable(
    floor=_NORMAL_BP,
    bands=[
        Band(lower_bound=80, **_STAGE_1),
        Band(lower_bound=90, **_STAGE_2),
        Band(lower_bound=100, **_STAGE_3),
    ],
)

LEVERAGE_RATIO = BandTable(
    floor=Band(
        label="Conservative Leverage",
        color_tag="green",
        interpretation="Low risk, sustainable leverage level",
        recommendations=["Conservative leverage minimizes risk exposure"],
    ),
    bands=[
        Band(
            label="Moderate Leverage",
            lower_bound=2,
            color_tag="blue",
            interpretation="Balanced risk and reward potential",
            recommendations=["Moderate leverage balances risk and reward potential"],
        ),
        Band(
            label="High Leverage",
            lower_bound=5,
            color_tag="orange",
            interpretation="High risk - requires careful monitoring",
            recommendations=["Requires active monitoring and risk management"],
        ),
        Band(
            label="Extreme Leverage",
            lower_bound=10,
            color_tag="red",
            interpretation="Very high risk - potential for significant losses",
            recommendations=["Consider reducing leverage to manage risk better"],
        ),
    ],
)

EBITDA_TIER = BandTable(
    floor=Band(
        label="Negative",
        color_tag="red",
        interpretation="Poor operational efficiency with immediate operational distress.",
        recommendations=["Critical operational management issues need attention"],
    ),
    bands=[
        Band(
            label="Marginal",
            lower_bound=0,
            color_tag="orange",
            interpretation="Marginal operational performance - operational concerns.",
            recommendations=["Urgent need to improve operational efficiency and profitability."],
        ),
        Band(
            label="Adequate",
            lower_bound=100_000,
            color_tag="yellow",
            interpretation="Adequate operational performance but monitor efficiency.",
            recommendations=["Focus on operational improvements and cost optimization."],
        ),
        Band(
            label="Good",
            lower_bound=500_000,
            color_tag="green",
            interpretation="Good operational performance with healthy profitability.",
            recommendations=["Continue current operations and optimize efficiency further."],
        ),
        Band(
            label="Excellent",
            lower_bound=1_000_000,
            color_tag="darkgreen",
            interpretation="Excellent operational performance with strong cash generation capability.",
            recommendations=["Maintain operational excellence and consider strategic investments."],
        ),
    ],
)

EXPECTED_RETURN = BandTable(
    floor=Band(
        label="Negative",
        color_tag="red",
        interpretation="Negative expected return - underperforming strategy.",
        recommendations=["Reassess holdings with negative return expectations."],
    ),
    bands=[
        Band(
            label="Low",
            lower_bound=0,
            color_tag="orange",
            interpretation="Low expected return - very conservative portfolio with minimal growth.",
            recommendations=["Review asset allocation - may need more growth-oriented investments."],
        ),
        Band(
            label="Conservative",
            lower_bound=5,
            color_tag="yellow",
            interpretation="Conservative expected return - stable portfolio with modest growth expectations.",
            recommendations=["Consider increasing growth assets if risk tolerance allows."],
        ),
        Band(
            label="Moderate",
            lower_bound=10,
            color_tag="green",
            interpretation="Moderate expected return - balanced portfolio with reasonable growth prospects.",
            recommendations=["Maintain balanced approach - good risk-return profile."],
        ),
        Band(
            label="High",
            lower_bound=15,
            color_tag="blue",
            interpretation="High expected return - aggressive portfolio with significant growth potential.",
            recommendations=["Monitor risk levels closely - high returns come with higher risk."],
        ),
    ],
)

# Tracking error in percentage points
TRACKING_ERROR = BandTable(
    floor=Band(
        label="Low",
        color_tag="green",
        interpretation="Low tracking error: portfolio closely follows the benchmark.",
        recommendations=["Evaluate rebalancing frequency and implementation costs."],
    ),
    bands=[
        Band(
            label="Moderate",
            lower_bound=2,
            color_tag="yellow",
            interpretation="Moderate tracking error: some active risk versus benchmark.",
            recommendations=["Align factor exposures with the benchmark."],
        ),
        Band(
            label="High",
            lower_bound=5,
            color_tag="red",
            interpretation="High tracking error: substantial active risk relative to benchmark.",
            recommendations=[
                "Align factor exposures with the benchmark.",
                "Diversify idiosyncratic bets to reduce active risk.",
            ],
        ),
    ],
)

TABLES: Dict[str, BandTable] = {
    "sweat-rate": SWEAT_RATE,
    "metabolic-syndrome": METABOLIC_SYNDROME,
    "systolic-bp": SYSTOLIC_BP,
    "diastolic-bp": DIASTOLIC_BP,
    "leverage-ratio": LEVERAGE_RATIO,
    "ebitda": EBITDA_TIER,
    "expected-return": EXPECTED_RETURN,
    "tracking-error": TRACKING_ERROR,
}


def get_table(name: str) -> BandTable:
    """Look up a band table by its registry name."""
    try:
        return TABLES[name]
    except KeyError:
        raise ValueError(f"Unknown band table: {name}")


def hypertension_stage(systolic: float, diastolic: float) -> Classification:
    """Blood pressure stage: the more severe of the systolic and diastolic readings."""
    by_systolic = classify(systolic, SYSTOLIC_BP)
    by_diastolic = classify(diastolic, DIASTOLIC_BP)

    diastolic_rank = SYSTOLIC_BP.rank(by_diastolic.label)
    if diastolic_rank > by_systolic.rank:
        return dataclasses.replace(by_diastolic, rank=diastolic_rank)
    return by_systolic
