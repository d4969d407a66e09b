from lipwalker.tools.plan_walk import main


def test_plan_walk_writes_csv(tmp_path, capsys):
    path = tmp_path / "walk.csv"
    main(["--steps", "2", "--dt", "0.01", "--output", str(path)])

    lines = path.read_text().splitlines()
    assert len(lines) == 2 * 60
    assert "Wrote 120 waypoints" in capsys.readouterr().out

    heights = [float(line.split(",")[2]) for line in lines]
    assert all(abs(z - 0.8) < 1e-9 for z in heights)
    lateral = [float(line.split(",")[1]) for line in lines]
    assert max(abs(y) for y in lateral) < 0.05
