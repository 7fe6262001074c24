"""End-to-end parses of published SSML examples.

The first four documents come from Appendix E of "Speech Synthesis Markup
Language (SSML) Version 1.1", Copyright (c) 2010 W3C (MIT, ERCIM, Keio),
All Rights Reserved.
"""

import unittest
from datetime import timedelta

from justssml import (
    Custom,
    ElementKind,
    InvalidNesting,
    MissingAttribute,
    ParseConfig,
    Span,
    parse_ssml,
)
from justssml.decoders import (
    BreakStrength,
    ContourPoint,
    Frequency,
    Gender,
    OnLanguageFailure,
    Percentage,
    PitchUnit,
    RelativeChange,
)

SIMPLE_EXAMPLE = """<?xml version="1.0"?>
        <speak version="1.1"
               xmlns="http://www.w3.org/2001/10/synthesis"
               xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
               xsi:schemaLocation="http://www.w3.org/2001/10/synthesis
                           http://www.w3.org/TR/speech-synthesis11/synthesis.xsd"
               xml:lang="en-US">
          <p>
            <s>You have 4 new messages.</s>
            <s>The first is from Stephanie Williams and arrived at <break/> 3:45pm.
            </s>
            <s>
              The subject is <prosody rate="20%">ski trip</prosody>
            </s>
          </p>
        </speak>"""

AUDIO_EXAMPLE = """<?xml version="1.0"?>
        <speak version="1.1"
               xmlns="http://www.w3.org/2001/10/synthesis"
               xml:lang="en-US">

          <p>
            <voice gender="male">
              <s>Today we preview the latest romantic music from Example.</s>

              <s>Hear what the Software Reviews said about Example's newest hit.</s>
            </voice>
          </p>

          <p>
            <voice gender="female">
              He sings about issues that touch us all.
            </voice>
          </p>

          <p>
            <voice gender="male">
              Here's a sample.  <audio src="http://www.example.com/music.wav"/>
              Would you like to buy it?
            </voice>
          </p>

        </speak>
        """

MIXED_LANGUAGE_EXAMPLE = """<?xml version="1.0" encoding="ISO-8859-1"?>
        <speak version="1.1" xmlns="http://www.w3.org/2001/10/synthesis"
               xml:lang="en-US">

          The title of the movie is:
          "La vita è bella"
          (Life is beautiful),
          which is directed by Roberto Benigni.
        </speak>"""

IPA_EXAMPLE = """<?xml version="1.0" encoding="ISO-8859-1"?>
        <speak version="1.1" xmlns="http://www.w3.org/2001/10/synthesis"
               xml:lang="en-US">

          The title of the movie is:
          <phoneme alphabet="ipa"
            ph="&#x2C8;l&#x251; &#x2C8;vi&#x2D0;&#x27E;&#x259; &#x2C8;&#x294;e&#x26A; &#x2C8;b&#x25B;l&#x259;">
          La vita è bella </phoneme>
          <!-- The IPA pronunciation is ˈlɑ ˈviːɾə ˈʔeɪ ˈbɛlə -->
          (Life is beautiful),
          which is directed by
          <phoneme alphabet="ipa"
            ph="&#x279;&#x259;&#x2C8;b&#x25B;&#x2D0;&#x279;&#x27E;o&#x28A; b&#x25B;&#x2C8;ni&#x2D0;nji">
          Roberto Benigni </phoneme>
        </speak>"""

DESCRIPTION_EXAMPLE = """<?xml version="1.0"?>
<speak xmlns="http://www.w3.org/2001/10/synthesis" xml:lang="en-US">

  <!-- Normal use of <desc> -->
  Heads of State often make mistakes when speaking in a foreign language.
  One of the most well-known examples is that of John F. Kennedy:
  <audio src="ichbineinberliner.wav">If you could hear it, this would be
  a recording of John F. Kennedy speaking in Berlin.
    <desc>Kennedy's famous German language gaffe</desc>
  </audio>
</speak>"""

GOOGLE_EXAMPLE = """<speak>
          Here are <say-as interpret-as="characters">SSML</say-as> samples.
          I can pause <break time="3s"/>.
          I can play a sound
          <audio src="https://www.example.com/MY_MP3_FILE.mp3">didn't get your MP3 audio file</audio>.
          I can speak in cardinals. Your number is <say-as interpret-as="cardinal">10</say-as>.
          Or I can speak in ordinals. You are <say-as interpret-as="ordinal">10</say-as> in line.
          Or I can even speak in digits. The digits for ten are <say-as interpret-as="characters">10</say-as>.
          I can also substitute phrases, like the <sub alias="World Wide Web Consortium">W3C</sub>.
          Finally, I can speak a paragraph with two sentences.
          <p><s>This is sentence one.</s><s>This is sentence two.</s></p>
        </speak>"""

MICROSOFT_EXAMPLE = """<speak version="1.0" xmlns="http://www.w3.org/2001/10/synthesis" \
xmlns:mstts="https://www.w3.org/2001/mstts" xml:lang="string">
    <mstts:backgroundaudio src="string" volume="string" fadein="string" fadeout="string"/>
    <voice name="string">
        <audio src="string"></audio>
        <bookmark mark="string"/>
        <break strength="medium" time="5s" />
        <emphasis level="reduced"></emphasis>
        <lang xml:lang="string"></lang>
        <lexicon xml:id="some_id" uri="string"/>
        <math xmlns="http://www.w3.org/1998/Math/MathML"></math>
        <mstts:express-as style="string" styledegree="value" role="string"></mstts:express-as>
        <mstts:silence type="string" value="string"/>
        <mstts:viseme type="string"/>
        <p></p>
        <phoneme alphabet="string" ph="string"></phoneme>
        <prosody pitch="2.2Hz" contour="(0%,+20Hz) (10%,+30Hz) (40%,+10Hz)" range="-2Hz" rate="20%" volume="2dB"></prosody>
        <s></s>
        <say-as interpret-as="cardinal" format="string" detail="string"></say-as>
        <sub alias="string"></sub>
    </voice>
</speak>"""


class TestW3CExamples(unittest.TestCase):
    def test_simple_example(self):
        doc = parse_ssml(SIMPLE_EXAMPLE)
        whole = (
            "You have 4 new messages. The first is from Stephanie Williams and arrived at 3:45pm. "
            "The subject is ski trip"
        )
        assert doc.get_text().strip() == whole

        tags = doc.tags()
        assert [tag.kind for tag in tags] == [
            ElementKind.SPEAK,
            ElementKind.P,
            ElementKind.S,
            ElementKind.S,
            ElementKind.BREAK,
            ElementKind.S,
            ElementKind.PROSODY,
        ]
        speak = tags[0]
        assert speak.attributes.lang == "en-US"
        assert speak.attributes.version == "1.1"
        assert dict(speak.attributes.extra)["xmlns:xsi"] == "http://www.w3.org/2001/XMLSchema-instance"
        assert doc.text_of(speak).strip() == whole
        assert doc.text_of(tags[1]).strip() == whole
        assert doc.text_of(tags[2]).strip() == "You have 4 new messages."
        assert doc.text_of(tags[3]).strip() == "The first is from Stephanie Williams and arrived at 3:45pm."
        assert doc.text_of(tags[5]).strip() == "The subject is ski trip"

        brk = tags[4]
        assert brk.attributes.strength is None
        assert brk.attributes.time is None
        assert brk.span == Span(doc.get_text().index("3:45pm."), doc.get_text().index("3:45pm."))

        prosody = tags[6].attributes
        assert prosody.rate == Percentage(20.0)
        assert prosody.pitch is None
        assert prosody.contour is None
        assert prosody.volume is None

    def test_audio_example(self):
        doc = parse_ssml(AUDIO_EXAMPLE)
        assert doc.get_text().strip() == (
            "Today we preview the latest romantic music from Example. "
            "Hear what the Software Reviews said about Example's newest hit. "
            "He sings about issues that touch us all. "
            "Here's a sample. Would you like to buy it?"
        )
        voices = doc.find_all(ElementKind.VOICE)
        assert [voice.attributes.gender for voice in voices] == [Gender.MALE, Gender.FEMALE, Gender.MALE]
        audio = doc.find_all(ElementKind.AUDIO)[0]
        assert audio.attributes.src == "http://www.example.com/music.wav"
        assert audio.span.is_empty

    def test_mixed_language_example(self):
        doc = parse_ssml(MIXED_LANGUAGE_EXAMPLE)
        assert doc.get_text().strip() == (
            'The title of the movie is: "La vita è bella" (Life is beautiful), which is directed by Roberto Benigni.'
        )

    def test_ipa_support(self):
        doc = parse_ssml(IPA_EXAMPLE)
        assert doc.get_text().strip() == (
            "The title of the movie is: La vita è bella (Life is beautiful), which is directed by Roberto Benigni"
        )
        assert [tag.kind for tag in doc.tags()] == [ElementKind.SPEAK, ElementKind.PHONEME, ElementKind.PHONEME]
        phonemes = [(tag.attributes.alphabet, tag.attributes.ph) for tag in doc.find_all(ElementKind.PHONEME)]
        assert phonemes == [
            ("ipa", "ˈlɑ ˈviːɾə ˈʔeɪ ˈbɛlə"),
            ("ipa", "ɹəˈbɛːɹɾoʊ bɛˈniːnji"),
        ]

    def test_description_is_not_spoken(self):
        doc = parse_ssml(DESCRIPTION_EXAMPLE)
        assert doc.get_text().strip() == (
            "Heads of State often make mistakes when speaking in a foreign language. "
            "One of the most well-known examples is that of John F. Kennedy: "
            "If you could hear it, this would be a recording of John F. Kennedy speaking in Berlin."
        )
        desc = doc.find_all(ElementKind.DESC)[0]
        assert desc.original_text == "Kennedy's famous German language gaffe"


class TestVendorExamples(unittest.TestCase):
    def test_google_example(self):
        expected = (
            "Here are SSML samples. I can pause . I can play a sound didn't get your MP3 audio file. "
            "I can speak in cardinals. Your number is 10. Or I can speak in ordinals. You are 10 in line. "
            "Or I can even speak in digits. The digits for ten are 10. "
            "I can also substitute phrases, like the {}. "
            "Finally, I can speak a paragraph with two sentences. This is sentence one. This is sentence two."
        )
        literal = parse_ssml(GOOGLE_EXAMPLE, ParseConfig(expand_substitutions=False))
        assert literal.get_text().strip() == expected.format("W3C")

        expanded = parse_ssml(GOOGLE_EXAMPLE)
        assert expanded.get_text().strip() == expected.format("World Wide Web Consortium")

        pause = expanded.find_all(ElementKind.BREAK)[0]
        assert pause.attributes.time == timedelta(seconds=3)

    def test_microsoft_custom_tags(self):
        config = ParseConfig(expand_substitutions=False)
        doc = parse_ssml(MICROSOFT_EXAMPLE, config)
        assert doc.get_text().strip() == ""
        assert parse_ssml(MICROSOFT_EXAMPLE).get_text().strip() == "string"

        assert [tag.kind for tag in doc.tags()] == [
            ElementKind.SPEAK,
            Custom("mstts:backgroundaudio"),
            ElementKind.VOICE,
            ElementKind.AUDIO,
            Custom("bookmark"),
            ElementKind.BREAK,
            ElementKind.EMPHASIS,
            ElementKind.LANG,
            ElementKind.LEXICON,
            Custom("math"),
            Custom("mstts:express-as"),
            Custom("mstts:silence"),
            Custom("mstts:viseme"),
            ElementKind.P,
            ElementKind.PHONEME,
            ElementKind.PROSODY,
            ElementKind.S,
            ElementKind.SAY_AS,
            ElementKind.SUB,
        ]

        brk = doc.find_all(ElementKind.BREAK)[0].attributes
        assert brk.strength is BreakStrength.MEDIUM
        assert brk.time == timedelta(seconds=5)

        phoneme = doc.find_all(ElementKind.PHONEME)[0].attributes
        assert phoneme.alphabet == "string"
        assert phoneme.ph == "string"

        prosody = doc.find_all(ElementKind.PROSODY)[0].attributes
        assert prosody.pitch == Frequency(2.2)
        assert prosody.range == RelativeChange(-2.0, PitchUnit.HZ)
        assert prosody.contour[1] == ContourPoint(Percentage(10.0), RelativeChange(30.0, PitchUnit.HZ))
        assert prosody.volume == 2.0

        assert doc.find_all("bookmark")[0].attributes.get("mark") == "string"

    def test_language_elements(self):
        doc = parse_ssml(
            '<speak version="1.1"><lang xml:lang="ja"></lang>'
            '<lang xml:lang="en" onlangfailure="ignoretext"></lang></speak>'
        )
        assert len(doc.tags()) == 3
        assert doc.tags()[1].attributes.lang == "ja"
        assert doc.tags()[1].attributes.on_lang_failure is None
        assert doc.tags()[2].attributes.on_lang_failure is OnLanguageFailure.IGNORE_TEXT

        with self.assertRaises(MissingAttribute):
            parse_ssml('<speak version="1.1"><lang lang="ja"></lang></speak>')

    def test_reject_invalid_combinations(self):
        with self.assertRaises(InvalidNesting):
            parse_ssml("<speak><speak>hello</speak></speak>")
        with self.assertRaises(InvalidNesting):
            parse_ssml("<speak><p>hello<p>world</p></p></speak>")


class TestSpans(unittest.TestCase):
    def test_positions_count_code_points(self):
        unicode = parse_ssml('<speak version="1.1">Let’s review a complex structure.</speak>')
        ascii_only = parse_ssml("<speak version=\"1.1\">Let's review a complex structure.</speak>")
        assert unicode.root.span == ascii_only.root.span
        assert ascii_only.root.span.end == len(ascii_only.get_text())

    def test_span_containment(self):
        doc = parse_ssml('<speak version="1.1">Hello <s><w>hello</w></s> world <break/></speak>')
        speak, sentence, word, brk = doc.tags()
        assert speak.span.contains(sentence.span)
        assert speak.span.contains(word.span)
        assert speak.span.contains(brk.span)
        assert sentence.span.contains(word.span)
        assert not sentence.span.contains(brk.span)
        assert not word.span.contains(brk.span)

    def test_break_inside_unbound_custom_tag(self):
        doc = parse_ssml(
            '<speak version="1.1"><mstts:express-as style="string">hello<break/> world</mstts:express-as></speak>'
        )
        custom, brk = doc.tags()[1:]
        assert custom.kind == Custom("mstts:express-as")
        assert custom.span.contains(brk.span)
        assert doc.get_text() == "hello world"


if __name__ == "__main__":
    unittest.main()
