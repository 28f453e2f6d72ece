"""Pytest configuration and shared fixtures for preset-to-LUT tests."""

import tempfile
from pathlib import Path

import pytest
import torch

XMP_HEADER = """<x:xmpmeta xmlns:x="adobe:ns:meta/">
 <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">"""

XMP_FOOTER = """ </rdf:RDF>
</x:xmpmeta>
"""


def make_xmp(attributes: str = "", children: str = "") -> str:
    """Wrap crs attributes and child elements in a minimal XMP preset document."""
    return f"""{XMP_HEADER}
  <rdf:Description rdf:about=""
    xmlns:crs="http://ns.adobe.com/camera-raw-settings/1.0/"
    {attributes}>
{children}
  </rdf:Description>
{XMP_FOOTER}"""


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_cube_file(temp_dir):
    """Provide a temporary .cube file path."""
    return temp_dir / "test.cube"


@pytest.fixture
def gradient_image():
    """
    Create a synthetic gradient test image with RGB gradients.

    Returns:
        torch.Tensor: Image tensor of shape (3, H, W) with values in [0, 1]
    """
    width, height = 64, 48

    # Create horizontal gradient for R
    r = torch.linspace(0, 1, width).unsqueeze(0).expand(height, -1)

    # Create vertical gradient for G
    g = torch.linspace(0, 1, height).unsqueeze(1).expand(-1, width)

    # Create diagonal gradient for B
    x = torch.linspace(0, 1, width).unsqueeze(0).expand(height, -1)
    y = torch.linspace(0, 1, height).unsqueeze(1).expand(-1, width)
    b = (x + y) / 2.0

    # Stack into (3, H, W) tensor
    return torch.stack([r, g, b], dim=0)


@pytest.fixture
def identity_lut_16():
    """Provide a 16x16x16 identity LUT."""
    from utils.transforms import identity_lut

    return identity_lut(resolution=16)


@pytest.fixture
def domain_default():
    """Provide default domain values."""
    return {"min": [0.0, 0.0, 0.0], "max": [1.0, 1.0, 1.0]}


@pytest.fixture
def full_preset_xmp():
    """A preset touching the basic, HSL, grading, calibration and curve panels."""
    attributes = """crs:Exposure2012="+0.50"
    crs:Contrast2012="+20"
    crs:Highlights2012="-40"
    crs:Shadows2012="+35"
    crs:Whites2012="+10"
    crs:Blacks2012="-15"
    crs:Clarity2012="+12"
    crs:Dehaze="+8"
    crs:Texture="+5"
    crs:Vibrance="+25"
    crs:Saturation="-10"
    crs:IncrementalTemperature="+15"
    crs:IncrementalTint="-5"
    crs:ConvertToGrayscale="False"
    crs:HueAdjustmentRed="+10"
    crs:SaturationAdjustmentBlue="-30"
    crs:LuminanceAdjustmentOrange="+20"
    crs:SplitToningShadowHue="220"
    crs:SplitToningShadowSaturation="25"
    crs:SplitToningHighlightHue="45"
    crs:SplitToningHighlightSaturation="30"
    crs:SplitToningBalance="+10"
    crs:ColorGradeMidtoneHue="30"
    crs:ColorGradeMidtoneSat="10"
    crs:ColorGradeBlending="70"
    crs:ShadowTint="+5"
    crs:CameraProfileRedPrimaryHue="+10"
    crs:CameraProfileBluePrimarySaturation="+20"
    """
    children = """   <crs:ToneCurvePV2012>
    <rdf:Seq>
     <rdf:li>0, 10</rdf:li>
     <rdf:li>128, 140</rdf:li>
     <rdf:li>255, 245</rdf:li>
    </rdf:Seq>
   </crs:ToneCurvePV2012>
   <crs:ToneCurvePV2012Blue>
    <rdf:Seq>
     <rdf:li>0, 20</rdf:li>
     <rdf:li>255, 255</rdf:li>
    </rdf:Seq>
   </crs:ToneCurvePV2012Blue>"""
    return make_xmp(attributes, children)


@pytest.fixture
def element_form_xmp():
    """Values written as crs child elements instead of attributes."""
    children = """   <crs:Exposure2012>-1.25</crs:Exposure2012>
   <crs:ConvertToGrayscale>True</crs:ConvertToGrayscale>
   <crs:GrayMixerRed>+40</crs:GrayMixerRed>"""
    return make_xmp(children=children)


@pytest.fixture
def empty_xmp():
    """A well-formed preset with no crs values at all."""
    return make_xmp()


@pytest.fixture
def malformed_xmp():
    """Truncated XML that cannot be parsed."""
    return '<x:xmpmeta xmlns:x="adobe:ns:meta/"><rdf:RDF'


@pytest.fixture
def preset_file(temp_dir, full_preset_xmp):
    """Write the full preset to disk as Warm Film.xmp."""
    path = temp_dir / "Warm Film.xmp"
    path.write_text(full_preset_xmp, encoding="utf-8")
    return path
