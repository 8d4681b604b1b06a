# pcmflow

Building blocks for streams of PCM audio samples, in pure Python with no
third-party dependencies. Every source is a plain Python iterator of
interleaved samples that also knows its channel count, its sample rate and,
where it can tell, its total duration.

## Modules

- `pcmflow.buffer`
  - `Source`: the abstract interface. Subclasses implement `__next__`,
    `current_frame_len()`, `channels()`, `sample_rate()` and
    `total_duration()` (a `datetime.timedelta` or `None`); `size_hint()`
    returns a `(lower, upper-or-None)` pair.
  - `SamplesBuffer(channels, sample_rate, data, sample_format=SampleFormat.I16)`:
    a source over a list of samples. Zero channels or a zero sample rate
    raise `ValueError`.
- `pcmflow.sample`
  - `SampleFormat`: `I16` (silence at 0), `U16` (silence at 32768) and `F32`
    (silence at 0.0, range -1.0..1.0), with `lerp()`, `amplify()`,
    `saturating_add()`, `zero_value()` and `convert(value, target)`.
  - `DataConverter(input, source_format, target_format)`: converts every
    sample of a stream to another format.
- `pcmflow.channels`
  - `ChannelCountConverter(input, from_channels, to_channels)`: extra output
    channels repeat the last input channel, surplus input channels are
    dropped.
- `pcmflow.sample_rate`
  - `SampleRateConverter(input, from_rate, to_rate, channels, sample_format=SampleFormat.I16)`:
    resampling by linear interpolation between consecutive frames.
- `pcmflow.mixer`
  - `mixer(channels, sample_rate, sample_format=SampleFormat.I16)` returns a
    `DynamicMixerController` and a `DynamicMixer`. Sources passed to
    `controller.add()` are converted to the mixer's channel count, rate and
    format, and the output yields their saturating sum until all have ended.
    New sources start on a frame boundary so channels stay aligned.
- `pcmflow.queue`
  - `queue(keep_alive_if_empty, sample_format=SampleFormat.I16)` returns a
    `SourcesQueueInput` and a `SourcesQueueOutput`. The output plays appended
    sources one after another. `append_with_signal()` returns a
    `threading.Event` that is set when that source has finished. With
    `keep_alive_if_empty` the output plays short stretches of silence while
    nothing is queued instead of ending; `set_keep_alive_if_empty()` changes
    this later.
- `pcmflow.wav`
  - `WavDecoder(data)`: decodes a seekable RIFF/WAVE stream into 16-bit
    signed samples. Integer PCM of 8, 16, 24 and 32 bits and 32-bit float
    are supported, including the extensible header. Other data raises
    `ValueError`.
  - `is_wave(data)`: tells whether a stream holds such data, leaving its
    position unchanged.
- `pcmflow.decoder`
  - `Decoder(data)`: detects the format of a seekable binary stream;
    `Decoder.new_wav()` and `Decoder.new_looped()` are alternative
    constructors. Unrecognised data raises `UnrecognizedFormatError`, a
    subclass of `DecoderError`.
  - `LoopedDecoder`: seeks back to the start and plays again whenever the
    data ends.
  - `Mp4Type`: the MP4 family of extensions; `Mp4Type.parse("M4A")` ignores
    case and raises `ValueError` on anything else.

## Installing

```
pip install .
```

With the test tools:

```
pip install ".[test]"
pytest
```

## Examples

Buffers are iterated like any other iterator:

```python
from pcmflow.buffer import SamplesBuffer
from pcmflow.sample import SampleFormat

buf = SamplesBuffer(2, 2, [0, 0, 0, 0, 0, 0], SampleFormat.I16)
print(buf.total_duration())   # 0:00:01.500000
print(list(buf))              # [0, 0, 0, 0, 0, 0]
```

Mixing two sounds:

```python
from pcmflow.buffer import SamplesBuffer
from pcmflow.mixer import mixer
from pcmflow.sample import SampleFormat

controller, output = mixer(1, 48000, SampleFormat.I16)
controller.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], SampleFormat.I16))
controller.add(SamplesBuffer(1, 48000, [5, 5, 5, 5], SampleFormat.I16))
print(list(output))           # [15, -5, 15, -5]
```

Playing sources in sequence:

```python
from pcmflow.buffer import SamplesBuffer
from pcmflow.queue import queue
from pcmflow.sample import SampleFormat

tx, rx = queue(False, SampleFormat.I16)
tx.append(SamplesBuffer(1, 48000, [1, 2, 3], SampleFormat.I16))
tx.append(SamplesBuffer(1, 48000, [4, 5], SampleFormat.I16))
print(list(rx))               # [1, 2, 3, 4, 5]
```

Decoding a WAV file into 16-bit samples:

```python
from pcmflow.decoder import Decoder

with open("sound.wav", "rb") as f:
    decoder = Decoder(f)
    print(decoder.channels(), decoder.sample_rate(), decoder.total_duration())
    samples = list(decoder)
```

## What it does not do

- It does not play sound: there is no connection to an audio device and no
  playback controls. Sources only produce samples for you to consume.
- The only file format it decodes is WAV. MP3, FLAC, Ogg Vorbis and MP4/AAC
  data are reported as `UnrecognizedFormatError`; `Mp4Type` names the MP4
  extensions but nothing decodes them.
- There are no effects such as volume envelopes, reverb or spatial panning
  beyond `SampleFormat.amplify()` on single samples.