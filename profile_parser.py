#!/usr/bin/env python3
"""Profile justssml to find performance bottlenecks."""

import cProfile
import io
import pstats

from justssml import JustSSML, to_ssml

# Sample SSML
ssml = (
    '<speak version="1.1" xmlns="http://www.w3.org/2001/10/synthesis" xml:lang="en-US">'
    + """
    <p>
        <s>You have <say-as interpret-as="cardinal">4</say-as> new messages.</s>
        <s>The first is from Stephanie Williams and arrived at <break time="300ms"/> 3:45pm.</s>
        <s>The subject is <prosody rate="90%" contour="(0%,+20Hz) (50%,x-high)">ski trip</prosody>.</s>
    </p>
    <voice gender="female" languages="en-US">
        Like the <sub alias="World Wide Web Consortium">W3C</sub>
        <audio src="beep.wav"><desc>a beep</desc>beep</audio> &amp; more.
    </voice>
"""
    * 100
    + "</speak>"
)

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = JustSSML(ssml)
    _ = to_ssml(result.document)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
