import streamlit as st

from utils.ui_layout import init_page_layout

render_layout = init_page_layout(
    page_title="Home",
    main_title="CapacityLab guide and assumptions",
    description="How the contracted-capacity model works and what it leaves out.",
)
render_layout()

st.markdown(
    """
## Welcome to CapacityLab
CapacityLab models the demand charge under a two-tier capacity tariff: a fixed rate on the
contracted capacity every month plus a penalty rate on any demand above it. A battery is
modeled as a flat peak-shaving offset on each month's maximum demand.

### How it works
- Effective demand after peak shaving: `Effective Demand = Max(0, Max Demand - Battery Capacity)`.
- Monthly charge: `Contracted Capacity × contracted rate + Max(0, Effective Demand - Contracted Capacity) × exceedance rate`.
- The optimizer tests every contracted capacity from 1,000 to 4,000 kW in 10 kW increments, sums the
  charge over all billing periods, and keeps the cheapest one. When several capacities cost the same,
  the smallest is chosen.
- Savings compare the current scenario against the original one: no battery and a fixed 3,100 kW
  contracted capacity.

### Using the workspace
1) Keep the bundled May–December 2024 history, upload a CSV with `label, max_demand_kw`, or paste readings in the sidebar.
2) Set the battery capacity (0–1,000 kW) and the contracted capacity (1,000–4,000 kW), both in 10 kW steps.
3) Drag vertically on the demand chart to move the contracted-capacity line; the tables update with every move.
4) Press **Set Optimal Capacity** to jump to the cost-minimizing value for the current battery size.
5) Download the monthly breakdown as CSV or a one-page PDF snapshot.
6) Open the **Capacity sweep** page for the full cost curve and a battery-size sensitivity.

### Assumptions & limitations
- The battery reduces maximum demand each month through peak shaving, assuming full availability and
  perfect prediction of peak usage.
- Charges use a contracted capacity rate of $16.37 per kW per month and an uncontracted rate of $24.56
  per kW of exceedance per month (Geneco high-tension tariff) unless overridden through
  `CAPACITYLAB_CONTRACTED_RATE` / `CAPACITYLAB_EXCEEDANCE_RATE`.
- The original scenario assumes no battery usage and a fixed contracted capacity of 3,100 kW.
- Peak/off-peak energy charges, reactive power charges, battery recharge times, grid constraints and
  demand response schedules are not modeled.
- Results may vary with actual operating conditions, battery efficiency and utility policies.
- Settings live only for the browser session; nothing is saved.
    """
)
