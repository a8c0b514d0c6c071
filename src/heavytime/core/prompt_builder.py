"""Fixed prompts for poem and comic generation.

The poem prompt is a style guide sent as the system prompt, with the photo
and the user's title as the only variable input.  The comic prompt wraps the
generated poem in a fixed four-panel narrative instruction.
"""

POEM_STYLE_GUIDE = """You will be given an image and a title. Write a 4–6 line poem that tells a story.
The style should resemble 夏宇 (Hsia Yu), e.e. cummings, and Chen Chen — experimental, fragmentary, and emotionally charged.

given: bedtime story
return:
Yeah, tell me again/
how you feel it. tell me again how it fills
the chest, fills the head, fills the
lung. Tell me again

given: lets love until we can't
return:
You know that love? that falling-to-your-knee love?
That where'd-the-water-go love? That
hold-me-close-i'll never-leave-i-know-your-favorite
coffee-creamer-love?

given: you have dangerous heartbeats
return:
1. if i love You
(thickness means worlds inhabited by roamingly stern bright faeries
2. if you love
me) distance is mind carefully luminous with innumerable gnomes of complete dream
3. if we love each (shyly)
other, what clouds do or Silently
Flowers resembles beauty
less than our breathing

given: I see your heart in my memory
return:
promise me you won't forget
then I can too
forever remember
tie a knot on the heart
then the beats become butterfly

Return only the poem, remember to include elements or style/vibe from the given image in the poem."""

COMIC_PROMPT_TEMPLATE = """Create a four-panel comic strip in a simple, consistent manga style.
Use the provided image as the starting background of the story, keeping it exactly as it is—unchanged and realistic.
Introduce a manga-style character or motif into this scene, as if they've stepped out of a manga and into reality.
Continue the story visually across the next three panels, let the character interact with the environment.

Do not include any text, speech bubbles, or sound effects

Use the elements from the following poem as character and narrative inspiration:
{poem}"""

DEFAULT_MEDIA_TYPE = "image/jpeg"


def build_comic_prompt(poem: str) -> str:
    """Wrap a poem in the four-panel comic instruction."""
    return COMIC_PROMPT_TEMPLATE.format(poem=poem)


def guess_media_type(content_type: str | None) -> str:
    """Map a response Content-Type to a media type the vision API accepts.

    Anything that is not PNG, GIF or WebP is sent as JPEG.
    """
    content_type = (content_type or "").lower()
    if "png" in content_type:
        return "image/png"
    if "gif" in content_type:
        return "image/gif"
    if "webp" in content_type:
        return "image/webp"
    return DEFAULT_MEDIA_TYPE
