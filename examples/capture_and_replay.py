import ezclip


source = ezclip.DxfHostStore.new()
psp = source.layout("paperspace")
psp.add_circle((10.0, 10.0), 0.5, dxfattribs={"layer": "E-SYM"})
psp.add_line((10.5, 10.0), (14.0, 10.0), dxfattribs={"layer": "E-CONDUIT"})
psp.add_mtext("STRING 1", dxfattribs={"layer": "E-TEXT", "insert": (14.5, 10.0), "char_height": 0.25})

payload = ezclip.capture_selection(source.selection("paperspace", "LINE CIRCLE MTEXT"), (10.0, 10.0, 0.0))
print("payload:", ezclip.write_payload_unique("/tmp/riser_symbols.json", payload))

target = ezclip.DxfHostStore.new()
result = ezclip.apply(payload, (250.0, 120.0, 0.0), target)
print(result)
target.save("/tmp/riser_symbols_out.dxf")
