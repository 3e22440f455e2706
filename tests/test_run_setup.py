import xml.etree.ElementTree as ET

from hpvqpcr.run_setup import ROTOR_GENE_COLORS, generate_final_list, generate_sample_xml


class TestGenerateFinalList:
    def test_nothing_selected(self):
        assert generate_final_list([]) == []

    def test_all_controls(self):
        result = generate_final_list(["P1", "P2"], positive=True, negative=True, ntc=True)
        assert len(result) == 8 * 5
        assert result[:5] == ["POS-1", "NEG Cont", "P1", "P2", "NTC"]
        assert result[-5:] == ["POS-8", "NEG Cont", "P1", "P2", "NTC"]

    def test_only_positive_controls(self):
        result = generate_final_list(["P1"], positive=True, mixes=2)
        assert result == ["POS-1", "P1", "POS-2", "P1"]

    def test_controls_without_patients(self):
        assert generate_final_list([], ntc=True, mixes=2) == ["NTC", "NTC"]

    def test_patients_without_controls_get_mix_suffix(self):
        result = generate_final_list(["P1", "P2"], mixes=2)
        assert result == ["P1-Mix 1", "P2", "P1-Mix 2", "P2"]


class TestGenerateSampleXml:
    def test_structure(self):
        xml = generate_sample_xml(["POS-1", "P1"])
        root = ET.fromstring(xml.encode("utf-8"))

        samples = root.findall("./Samples/Page/Sample")
        assert len(samples) == 72
        assert samples[0].findtext("Name") == "POS-1"
        assert samples[0].findtext("Selected") == "True"
        assert samples[2].findtext("Name") == ""
        assert samples[2].findtext("Selected") == "False"
        assert samples[71].findtext("TubePosition") == "72"

    def test_colors_cycle(self):
        root = ET.fromstring(generate_sample_xml([]).encode("utf-8"))
        samples = root.findall("./Samples/Page/Sample")
        assert samples[0].findtext("Color") == str(ROTOR_GENE_COLORS[0])
        assert samples[32].findtext("Color") == str(ROTOR_GENE_COLORS[0])

    def test_names_are_escaped(self):
        root = ET.fromstring(generate_sample_xml(["A&B <1>"]).encode("utf-8"))
        assert root.find("./Samples/Page/Sample/Name").text == "A&B <1>"

    def test_starts_with_declaration(self):
        assert generate_sample_xml([]).startswith("<?xml version='1.0' encoding='utf-8'?>")
