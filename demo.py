import marimo

__generated_with = "0.17.6"
app = marimo.App(width="full")


@app.cell
def _():
    import marimo as mo
    import numpy as np

    from selection_mask import (
        FreehandStroke,
        LayerGeometry,
        PathCommand,
        Rectangle,
        SelectionModel,
    )
    from selection_mask.config import configure_logging, get_settings
    from selection_mask.viz import plot_edge_map, plot_mask_preview

    # SELECTION_MASK_* variables (or a .env file) tune both components
    settings = get_settings()
    configure_logging(settings.log_level)
    return (
        FreehandStroke,
        LayerGeometry,
        PathCommand,
        Rectangle,
        SelectionModel,
        mo,
        np,
        plot_edge_map,
        plot_mask_preview,
        settings,
    )


@app.cell
def _(mo):
    mo.md("""
    # Selection to Mask

    The overlay lets the user draw rectangles and freehand strokes over the
    displayed image. This notebook builds the mask the image-editing API
    receives, and shows the edge map used to snap strokes to contours.

    The test image is synthetic: a bright disc on a dark gradient, placed
    on the overlay at offset (40, 30).
    """)
    return


@app.cell
def _(LayerGeometry, np):
    # Synthetic 320x240 image: horizontal gradient plus a bright disc
    h, w = 240, 320
    yy, xx = np.mgrid[0:h, 0:w]
    image = np.zeros((h, w, 3), dtype=np.uint8)
    image[..., 0] = (xx / w * 80).astype(np.uint8)
    image[..., 2] = (yy / h * 80).astype(np.uint8)
    disc = (xx - 200) ** 2 + (yy - 120) ** 2 < 60 ** 2
    image[disc] = (230, 210, 90)

    geometry = LayerGeometry(offset_x=40, offset_y=30, original_width=w, original_height=h)
    return geometry, image


@app.cell
def _(FreehandStroke, PathCommand, Rectangle, SelectionModel):
    # Shapes as the overlay reports them, in display coordinates
    model = SelectionModel()
    region = Rectangle(60, 50, 90, 70, region_id=model.next_region_id())
    model.add(region)
    model.set_instruction(region.region_id, "replace with a window")
    model.add(FreehandStroke((
        PathCommand.move(200, 220),
        PathCommand.quad(260, 160, 320, 220),
        PathCommand.line(340, 250),
    ), stroke_width=24))
    model.instructions()
    return (model,)


@app.cell
def _(geometry, model, settings):
    compositor = settings.compositor()
    result = compositor.build_mask(model.snapshot(), geometry)
    print(result)
    return (result,)


@app.cell
def _(image, plot_mask_preview, result, settings):
    detector = settings.edge_detector()
    edges = detector.edge_map(image)
    plot_mask_preview(image, result, edge_map=edges)
    return detector, edges


@app.cell
def _(mo):
    mo.md("""
    ## Edge snapping

    While drawing, each pointer position (in the same space as the buffer)
    is snapped to the strongest gradient within the search radius. A point
    far from any contour comes back unchanged with zero strength.
    """)
    return


@app.cell
def _(detector, edges, image, plot_edge_map):
    for query in [(150, 120), (205, 70), (40, 40)]:
        print(query, '->', detector.find_nearest_edge(image, query))
    plot_edge_map(edges)
    return


if __name__ == "__main__":
    app.run()
