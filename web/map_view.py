# web/map_view.py
import pydeck as pdk

from config import BORDER_STYLES, MAPBOX_API_KEY
from models import OverlayLayer
from renderer import MapCanvas

TOOLTIP = {
    "html": "{popup}",
    "style": {"backgroundColor": "white", "color": "black", "fontSize": "13px"},
}


def overlay_to_layer(layer: OverlayLayer, canvas: MapCanvas) -> pdk.Layer:
    """OverlayLayer 하나를 pydeck GeoJsonLayer로 변환합니다."""
    style = BORDER_STYLES[layer.border_class]
    feature = {
        "type": "Feature",
        "geometry": layer.geometry,
        "properties": {"name": layer.display_name, "popup": layer.popup_html, "pattern": layer.pattern_id or ""},
    }
    kwargs = dict(
        id=layer.layer_id,
        data={"type": "FeatureCollection", "features": [feature]},
        stroked=True, filled=True, pickable=True, auto_highlight=True,
        get_line_color=style["line_color"],
        get_fill_color=style["fill_color"],
        line_width_min_pixels=style["line_width"],
    )

    if layer.pattern_id:
        # 국기 이미지를 패턴 아틀라스로 쓰는 deck.gl FillStyleExtension
        pattern = canvas.patterns[layer.pattern_id]
        kwargs.update(
            extensions=[{"@@type": "FillStyleExtension", "pattern": True}],
            fill_pattern_atlas=pattern.image_url,
            fill_pattern_mapping={
                pattern.pattern_id: {
                    "x": 0, "y": 0, "width": pattern.width, "height": pattern.height, "mask": False,
                }
            },
            get_fill_pattern="properties.pattern",
            get_fill_pattern_scale=1,
            get_fill_color=[255, 255, 255, 230],
        )

    return pdk.Layer("GeoJsonLayer", **kwargs)


def build_deck(canvas: MapCanvas) -> pdk.Deck:
    """현재 지도 상태로 pydeck Deck을 만듭니다."""
    lat, lon, zoom = canvas.view
    view_state = pdk.ViewState(latitude=lat, longitude=lon, zoom=zoom)
    _, provider, style = canvas.basemap
    layers = [overlay_to_layer(layer, canvas) for layer in canvas.layers.values()]

    deck_kwargs = dict(layers=layers, initial_view_state=view_state, tooltip=TOOLTIP,
                       map_provider=provider, map_style=style)
    if provider == "mapbox":
        deck_kwargs["api_keys"] = {"mapbox": MAPBOX_API_KEY}
    return pdk.Deck(**deck_kwargs)
