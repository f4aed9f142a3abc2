# wx_simulation/utils.py
import matplotlib.pyplot as plt


def plot_forecast(df, columns=("temp_f", "rh_pct")):
    fig, axes = plt.subplots(len(columns), 1, figsize=(10, 3 * len(columns)), sharex=True, squeeze=False)
    for ax, col in zip(axes[:, 0], columns):
        ax.plot(df["date"], df[col])
        ax.set_title(f"Forecast: {col}")
    fig.tight_layout()
    return fig


def plot_staged_plan(plan):
    fig, ax = plt.subplots(figsize=(6, 3))
    days = [f"Day {i + 1}" for i in range(len(plan.steps))]
    ax.bar(days, plan.steps)
    ax.axhline(1.0, color="grey", linestyle="--", label="Baseline")
    ax.set_title(plan.narrative)
    ax.legend()
    return fig
