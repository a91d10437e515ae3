import plotly.express as px
import pandas as pd

def history_frame(access_history, hit_history):
    df = pd.DataFrame({"accesses": access_history, "hits": hit_history})
    df["hit_rate"] = df["hits"] / df["accesses"]
    return df

def export_hit_rate(access_history, hit_history, path: str, title: str = "Cache Hit Rate over Trace"):
    if not access_history:
        with open(path, "w") as f:
            f.write("<h1>Cache Hit Rate</h1><p>No data to display.</p>")
        return

    df = history_frame(access_history, hit_history)

    fig = px.line(
        df,
        x="accesses",
        y="hit_rate",
        hover_data=["hits"],
        title=title,
        labels={"accesses": "Accesses", "hit_rate": "Cumulative Hit Rate", "hits": "Hits"}
    )

    fig.update_yaxes(range=[0, 1], tickformat=".0%")
    fig.update_layout(
        font=dict(family="Courier New, monospace", size=12),
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)

def export_hit_rate_ascii(access_history, hit_history, width: int = 60, height: int = 10):
    if not access_history:
        return "No accesses recorded."

    n = len(access_history)
    # Sample one point per column
    columns = min(width, n)
    rates = []
    for col in range(columns):
        i = (col + 1) * n // columns - 1
        rates.append(hit_history[i] / access_history[i])

    chart = "Cumulative Hit Rate (ASCII)\n"
    chart += "" + ("-" * (columns + 8)) + "\n"
    for row in range(height, 0, -1):
        threshold = row / height
        label = f"{threshold:>5.0%} |" if row in (height, height // 2) else "      |"
        chart += label + "".join('#' if r >= threshold - 0.5 / height else ' ' for r in rates) + "\n"
    chart += "   0% |" + ("_" * columns) + "\n"
    chart += f"       1 {' ' * max(columns - len(str(n)) - 2, 1)}{n} accesses\n"

    return chart
