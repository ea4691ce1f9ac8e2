import pytest

from regiontree.__main__ import main, setup_argument_parser
from regiontree.io_utils import read_sequences


def test_extract_single_region(genome_fasta, genome_sequences, tmp_path):
    output = tmp_path / "region.fasta"
    exit_code = main(["extract", "-i", str(genome_fasta), "-o", str(output), "-s", "3", "-e", "6"])

    assert exit_code == 0
    region = read_sequences(output)
    assert region.as_dict() == {
        seq_id: sequence[2:6] for seq_id, sequence in genome_sequences.items()
    }


def test_extract_two_line_output(genome_fasta, tmp_path):
    output = tmp_path / "region.fasta"
    main(["extract", "-i", str(genome_fasta), "-o", str(output), "-s", "1", "-e", "60", "--two-line"])
    lines = output.read_text().splitlines()
    assert len(lines) == 10
    assert all(len(line) == 60 for line in lines[1::2])


def test_extract_region_file(genome_fasta, tmp_path):
    regions = tmp_path / "regions.csv"
    regions.write_text("start,end,name\n1,10,nsp1\n21,40,spike\n")
    out_dir = tmp_path / "regions"

    exit_code = main(
        ["extract", "-i", str(genome_fasta), "-o", str(out_dir), "--region-file", str(regions)]
    )

    assert exit_code == 0
    assert sorted(path.name for path in out_dir.iterdir()) == ["nsp1.fasta", "spike.fasta"]
    assert read_sequences(out_dir / "spike.fasta").lengths()["hCoV_A"] == 20


def test_extract_region_file_writes_nothing_when_a_region_fails(genome_fasta, tmp_path):
    regions = tmp_path / "regions.csv"
    regions.write_text("start,end,name\n1,10,nsp1\n21,999,spike\n")
    out_dir = tmp_path / "regions"

    exit_code = main(
        ["extract", "-i", str(genome_fasta), "-o", str(out_dir), "--region-file", str(regions)]
    )

    assert exit_code == 1
    assert not out_dir.exists() or not any(out_dir.iterdir())


def test_extract_region_file_checks_all_outputs_first(genome_fasta, tmp_path):
    regions = tmp_path / "regions.csv"
    regions.write_text("start,end,name\n1,10,nsp1\n21,40,spike\n")
    out_dir = tmp_path / "regions"
    out_dir.mkdir()
    (out_dir / "spike.fasta").write_text(">old\nA\n")

    exit_code = main(
        ["extract", "-i", str(genome_fasta), "-o", str(out_dir), "--region-file", str(regions)]
    )

    assert exit_code == 1
    assert sorted(path.name for path in out_dir.iterdir()) == ["spike.fasta"]


def test_extract_refuses_to_overwrite(genome_fasta, tmp_path):
    output = tmp_path / "region.fasta"
    output.write_text(">old\nA\n")
    argv = ["extract", "-i", str(genome_fasta), "-o", str(output), "-s", "1", "-e", "5"]

    assert main(argv) == 1
    assert main(argv + ["--force"]) == 0
    assert "old" not in output.read_text()


def test_extract_past_genome_end_fails(genome_fasta, tmp_path):
    output = tmp_path / "region.fasta"
    exit_code = main(["extract", "-i", str(genome_fasta), "-o", str(output), "-s", "50", "-e", "61"])
    assert exit_code == 1
    assert not output.exists()


def test_extract_missing_input_fails(tmp_path):
    exit_code = main(
        ["extract", "-i", str(tmp_path / "none.fasta"), "-o", str(tmp_path / "o.fasta"), "-s", "1", "-e", "2"]
    )
    assert exit_code == 1


def test_extract_requires_bounds(genome_fasta, tmp_path):
    with pytest.raises(SystemExit):
        main(["extract", "-i", str(genome_fasta), "-o", str(tmp_path / "o.fasta"), "-s", "1"])


def test_positive_integer_validation(genome_fasta, tmp_path):
    with pytest.raises(SystemExit):
        main(["extract", "-i", str(genome_fasta), "-o", str(tmp_path / "o.fasta"), "-s", "0", "-e", "2"])


def test_run_reports_missing_fasttree(genome_fasta, tmp_path):
    exit_code = main(
        [
            "run",
            "-i",
            str(genome_fasta),
            "-o",
            str(tmp_path / "results"),
            "-s",
            "1",
            "-e",
            "60",
            "--prealigned",
            "--no-plots",
            "--fasttree",
            "regiontree-no-such-fasttree",
        ]
    )
    assert exit_code == 1
    # Steps before the likelihood tree have completed
    assert (tmp_path / "results" / "upgma.newick").exists()


def test_run_parser_defaults():
    args = setup_argument_parser().parse_args(["run", "-i", "g.fa", "-o", "out", "-s", "1", "-e", "9"])
    assert args.bootstrap == 100
    assert args.workers == 1
    assert args.method == "upgma"
    assert not args.prealigned


def test_negative_bootstrap_is_rejected():
    parser = setup_argument_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["run", "-i", "g.fa", "-o", "out", "-s", "1", "-e", "9", "-b", "-1"])
    args = parser.parse_args(["run", "-i", "g.fa", "-o", "out", "-s", "1", "-e", "9", "-b", "0"])
    assert args.bootstrap == 0
