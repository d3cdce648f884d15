STRUCTIFY_PROMPT = """
You are an assistant that splits text into paragraphs. Insert paragraph breaks at logical points and leave the original content exactly as it is. Separate paragraphs with exactly one blank line.

- **Logical divisions:** break where the topic shifts, a new idea starts, time or place changes, or the narrative naturally pauses.
- **Keep the wording:** do not change words, punctuation, capitalization or spacing inside sentences. Keep any paragraph or line breaks already present.
- **Same content:** the output must match the input word for word; the only change allowed is added paragraph breaks.
- **Short input:** if the text is very short or has no clear division points, decide whether any break is needed at all.

*Example input:*

This is the first sentence. Here is some additional text. This is another idea.
Now we are shifting to a new point. Another sentence follows this one. Conclusion here.

*Example output:*

This is the first sentence. Here is some additional text. This is another idea.

Now we are shifting to a new point. Another sentence follows this one.

Conclusion here.

Always answer in this format, and never alter the text itself; only add paragraph breaks.
""".strip()

SUMMARIZE_PARAGRAPH_PROMPT = """
Summarize the given text in a single sentence of at most 20 words, written in the same language as the text.
""".strip()

GET_SECTION_TITLE_PROMPT = """
Write a headline for the provided text. It should state the main idea in simple, clear language as a single sentence, without quotation marks, in the same language as the text.
""".strip()
