import logging

import dash
from dash import Dash, Output, Input, State
import dash_mantine_components as dmc

from services.config import LOG_FORMAT, LOG_LEVEL

# DMC 2.x needs React 18 on Dash 2.x
try:
    from dash._dash_renderer import _set_react_version
    _set_react_version("18.2.0")
except (ImportError, AttributeError):
    pass

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

NAV_LINKS = [
    ("Dashboard", "/"),
    ("Stats & Analytics", "/stats"),
]

app = Dash(__name__, use_pages=True, suppress_callback_exceptions=True)


def sidebar_links():
    return [
        dmc.NavLink(label=label, href=href, variant="subtle", fw=500)
        for label, href in NAV_LINKS
    ]


app.layout = dmc.MantineProvider(
    theme={
        "fontFamily": "'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif",
        "headings": {
            "fontFamily": "'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif",
            "fontWeight": "600"
        }
    },
    children=dmc.AppShell(
        id="appshell",
        padding="sm",
        navbar={
            "width": 240,
            "breakpoint": "sm",
            "collapsed": {"mobile": True, "desktop": False},
        },
        header={
            "height": 60,
            "collapseOffset": 60,
        },
        children=[
            dmc.AppShellHeader(
                children=[
                    dmc.Group(
                        children=[
                            dmc.Burger(
                                id="nav-burger",
                                opened=False,
                                size="sm",
                                hiddenFrom="sm",
                            ),
                            dmc.Title("Simple Inventory", order=4, ml="md"),
                        ],
                        h="100%",
                        px="md",
                        align="center"
                    )
                ]
            ),
            dmc.AppShellNavbar(
                id="app-navbar",
                p="md",
                children=[
                    dmc.Stack(
                        [
                            dmc.Title("Stock Tracker", order=3),
                            dmc.Divider(),
                            *sidebar_links(),
                        ],
                        gap="sm",
                    )
                ],
            ),
            dmc.AppShellMain(
                dmc.Container(dash.page_container, size="responsive", px="md", py="lg"),
            )
        ],
    ),
)


@app.callback(
    Output("appshell", "navbar"),
    Input("nav-burger", "opened"),
    State("appshell", "navbar"),
    prevent_initial_call=False,
)
def toggle_navbar(opened, navbar):
    navbar["collapsed"] = {"mobile": not opened, "desktop": False}
    logger.debug(f"Toggle navbar: opened={opened} -> collapsed.mobile={not opened}")
    return navbar


# Expose Flask server for Gunicorn
server = app.server

if __name__ == '__main__':
    app.run(debug=True)
