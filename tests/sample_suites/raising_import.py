raise RuntimeError("module body failed")
