import dash
from dash import dcc, html
import dash_mantine_components as dmc

from services.config import DISTRIBUTION_BAR_WIDTH, DISTRIBUTION_TOP_N, LOW_STOCK_THRESHOLD
from services.inventory_charts import (
    build_distribution_chart,
    format_low_stock,
    format_money,
    render_distribution_chart,
)
from services.inventory_metrics import get_inventory_stats
from services.inventory_store import get_inventory_store

dash.register_page(
    __name__,
    path='/stats',
    name='Stats & Analytics',
    title='Inventory Stats'
)


def _stat_card(label, value, detail=None):
    children = [
        dmc.Text(label, size='sm', c='dimmed'),
        dmc.Text(value, size='lg', fw=600),
    ]
    if detail is not None:
        children.append(dmc.Text(detail, size='xs', c='dimmed'))
    return dmc.GridCol(
        dmc.Paper(dmc.Stack(children), p='md', radius='md', withBorder=True),
        span=4,
    )


def layout():
    stats = get_inventory_stats(
        get_inventory_store().items(),
        threshold=LOW_STOCK_THRESHOLD,
        top_n=DISTRIBUTION_TOP_N,
        bar_width=DISTRIBUTION_BAR_WIDTH,
    )

    header = [
        dmc.Title('Stats & Analytics', order=2),
        dmc.Text('Stock highlights and quantity distribution.', c='dimmed'),
    ]

    if stats.is_empty:
        return dmc.Container(
            header + [dmc.Text('No inventory data to analyze yet. Add some items!', mt='md')],
            size='lg',
            py='lg',
        )

    top_item = stats.top_item
    top_name = top_item.name if top_item else 'N/A'
    top_qty = f"{top_item.quantity:,} units" if top_item else '0 units'

    children = list(header)
    if stats.low_stock:
        children.append(
            dmc.Alert(
                f"Some products are below {stats.low_stock_threshold} units: {format_low_stock(stats.low_stock)}",
                title='Low stock warning',
                color='red',
                mt='md',
                className='low-stock-warning',
            )
        )

    children.extend([
        dmc.Grid(
            [
                _stat_card('Top Stocked Item', top_name, top_qty),
                _stat_card(f'Low Stock (< {stats.low_stock_threshold})', format_low_stock(stats.low_stock)),
                _stat_card('Average Unit Price', format_money(stats.average_price)),
            ],
            gutter='lg',
            mt='md',
        ),
        dmc.Paper(
            dmc.Stack([
                dmc.Text('Distribution', fw=600, mb='md'),
                html.Pre(
                    render_distribution_chart(stats.distribution),
                    id='distribution-chart',
                    style={'fontFamily': 'monospace', 'margin': 0},
                ),
                dcc.Graph(
                    id='distribution-graph',
                    figure=build_distribution_chart(stats.distribution, bar_width=DISTRIBUTION_BAR_WIDTH),
                    config={'displayModeBar': False},
                ),
            ]),
            p='md',
            radius='md',
            withBorder=True,
            mt='lg',
        ),
    ])

    return dmc.Container(children, size='lg', py='lg')
