import logging

import dash
from dash import html, Output, Input, ALL, ctx
from dash.exceptions import PreventUpdate
import dash_mantine_components as dmc

from services.inventory_charts import format_money
from services.inventory_metrics import compute_summary, inventory_frame
from services.inventory_store import get_inventory_store

logger = logging.getLogger(__name__)

dash.register_page(
    __name__,
    path='/',
    name='Dashboard',
    title='Inventory Dashboard'
)


def _kpi_card(label, value, element_id):
    return dmc.GridCol(
        dmc.Paper(
            dmc.Stack([
                dmc.Text(label, size='sm', c='dimmed'),
                dmc.Text(value, size='xl', fw=600, id=element_id),
            ]),
            p='md',
            radius='md',
            withBorder=True,
        ),
        span=4,
    )


def _summary_values(items):
    summary = compute_summary(items)
    return (
        f"{summary.total_units:,}",
        f"{summary.unique_product_count:,}",
        format_money(summary.total_value),
    )


def _inventory_table(items):
    df = inventory_frame(items)
    if df.empty:
        return dmc.Text('No items in stock yet.', c='dimmed')

    rows = [
        dmc.TableTr([
            dmc.TableTd(row['name']),
            dmc.TableTd(f"{row['quantity']:,}"),
            dmc.TableTd(format_money(row['price'])),
            dmc.TableTd(
                dmc.Button(
                    'Remove',
                    id={'type': 'inventory-remove', 'index': int(row['id'])},
                    color='red',
                    variant='light',
                    size='xs',
                )
            ),
        ])
        for row in df.to_dict('records')
    ]

    return dmc.Table(
        [
            dmc.TableThead(
                dmc.TableTr([
                    dmc.TableTh('Product'),
                    dmc.TableTh('Quantity'),
                    dmc.TableTh('Price'),
                    dmc.TableTh('Action'),
                ])
            ),
            dmc.TableTbody(rows),
        ],
        striped=True,
        highlightOnHover=True,
    )


def layout():
    items = get_inventory_store().items()
    total_items, unique_products, total_value = _summary_values(items)

    return dmc.Container(
        [
            dmc.Title('Inventory Dashboard', order=2),
            dmc.Text('Current stock levels and inventory value.', c='dimmed'),

            dmc.Grid(
                [
                    _kpi_card('Total Items', total_items, 'dashboard-kpi-total-items'),
                    _kpi_card('Unique Products', unique_products, 'dashboard-kpi-unique-products'),
                    _kpi_card('Total Value', total_value, 'dashboard-kpi-total-value'),
                ],
                gutter='lg',
                mt='md',
            ),

            dmc.Paper(
                dmc.Stack([
                    dmc.Text('Inventory', fw=600, mb='md'),
                    html.Div(_inventory_table(items), id='dashboard-inventory-table'),
                ]),
                p='md',
                radius='md',
                withBorder=True,
                mt='lg',
            ),
        ],
        size='lg',
        py='lg'
    )


@dash.callback(
    Output('dashboard-kpi-total-items', 'children'),
    Output('dashboard-kpi-unique-products', 'children'),
    Output('dashboard-kpi-total-value', 'children'),
    Output('dashboard-inventory-table', 'children'),
    Input({'type': 'inventory-remove', 'index': ALL}, 'n_clicks'),
    prevent_initial_call=True,
)
def remove_inventory_item(n_clicks):
    # re-rendered buttons fire with n_clicks=None
    if not ctx.triggered_id or not ctx.triggered or not ctx.triggered[0]['value']:
        raise PreventUpdate

    store = get_inventory_store()
    store.remove_item(ctx.triggered_id['index'])

    items = store.items()
    return (*_summary_values(items), _inventory_table(items))
