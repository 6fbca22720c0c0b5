import ezclip

store = ezclip.DxfHostStore.new()
for side in ("left", "right"):
    arc = ezclip.arc_through_two_points((0.0, 0.0), (10.0, 0.0), side, layer="E-ARC")
    print(side, f"center={arc.center}", f"radius={arc.radius:.3f}")
    ezclip.create_arc_through_two_points(store, (0.0, 0.0), (10.0, 0.0), side, layer="E-ARC")

ezclip.create_filled_circle(store, (5.0, 0.0, 0.0), 0.25)
store.save("arcs.dxf")
print("saved: arcs.dxf")
