"""Bundled reference data.

The canonical 66-book table drives navigation even when the API is
unreachable; chapter counts here are authoritative.
"""

from typing import NamedTuple, Optional


class StaticBook(NamedTuple):
    id: str
    name: str
    order: int
    chapters: int
    testament: str  # "old" or "new"


class VerseOfTheDay(NamedTuple):
    reference: str
    text: str


KJV_BIBLE_ID = "de4e12af7f28f599-02"

FALLBACK_BIBLES = [
    {
        "id": KJV_BIBLE_ID,
        "name": "King James Version",
        "englishName": "King James Version",
        "shortName": "KJV",
        "language": "en",
        "languageName": "English",
        "textDirection": "ltr",
        "availableFormats": ["json"],
        "numberOfBooks": 66,
        "totalNumberOfChapters": 1189,
        "totalNumberOfVerses": 31102,
    }
]

STATIC_BOOKS: list[StaticBook] = [
    StaticBook("GEN", "Genesis", 1, 50, "old"),
    StaticBook("EXO", "Exodus", 2, 40, "old"),
    StaticBook("LEV", "Leviticus", 3, 27, "old"),
    StaticBook("NUM", "Numbers", 4, 36, "old"),
    StaticBook("DEU", "Deuteronomy", 5, 34, "old"),
    StaticBook("JOS", "Joshua", 6, 24, "old"),
    StaticBook("JDG", "Judges", 7, 21, "old"),
    StaticBook("RUT", "Ruth", 8, 4, "old"),
    StaticBook("1SA", "1 Samuel", 9, 31, "old"),
    StaticBook("2SA", "2 Samuel", 10, 24, "old"),
    StaticBook("1KI", "1 Kings", 11, 22, "old"),
    StaticBook("2KI", "2 Kings", 12, 25, "old"),
    StaticBook("1CH", "1 Chronicles", 13, 29, "old"),
    StaticBook("2CH", "2 Chronicles", 14, 36, "old"),
    StaticBook("EZR", "Ezra", 15, 10, "old"),
    StaticBook("NEH", "Nehemiah", 16, 13, "old"),
    StaticBook("EST", "Esther", 17, 10, "old"),
    StaticBook("JOB", "Job", 18, 42, "old"),
    StaticBook("PSA", "Psalms", 19, 150, "old"),
    StaticBook("PRO", "Proverbs", 20, 31, "old"),
    StaticBook("ECC", "Ecclesiastes", 21, 12, "old"),
    StaticBook("SNG", "Song of Songs", 22, 8, "old"),
    StaticBook("ISA", "Isaiah", 23, 66, "old"),
    StaticBook("JER", "Jeremiah", 24, 52, "old"),
    StaticBook("LAM", "Lamentations", 25, 5, "old"),
    StaticBook("EZK", "Ezekiel", 26, 48, "old"),
    StaticBook("DAN", "Daniel", 27, 12, "old"),
    StaticBook("HOS", "Hosea", 28, 14, "old"),
    StaticBook("JOL", "Joel", 29, 3, "old"),
    StaticBook("AMO", "Amos", 30, 9, "old"),
    StaticBook("OBA", "Obadiah", 31, 1, "old"),
    StaticBook("JON", "Jonah", 32, 4, "old"),
    StaticBook("MIC", "Micah", 33, 7, "old"),
    StaticBook("NAH", "Nahum", 34, 3, "old"),
    StaticBook("HAB", "Habakkuk", 35, 3, "old"),
    StaticBook("ZEP", "Zephaniah", 36, 3, "old"),
    StaticBook("HAG", "Haggai", 37, 2, "old"),
    StaticBook("ZEC", "Zechariah", 38, 14, "old"),
    StaticBook("MAL", "Malachi", 39, 4, "old"),
    StaticBook("MAT", "Matthew", 40, 28, "new"),
    StaticBook("MRK", "Mark", 41, 16, "new"),
    StaticBook("LUK", "Luke", 42, 24, "new"),
    StaticBook("JHN", "John", 43, 21, "new"),
    StaticBook("ACT", "Acts", 44, 28, "new"),
    StaticBook("ROM", "Romans", 45, 16, "new"),
    StaticBook("1CO", "1 Corinthians", 46, 16, "new"),
    StaticBook("2CO", "2 Corinthians", 47, 13, "new"),
    StaticBook("GAL", "Galatians", 48, 6, "new"),
    StaticBook("EPH", "Ephesians", 49, 6, "new"),
    StaticBook("PHP", "Philippians", 50, 4, "new"),
    StaticBook("COL", "Colossians", 51, 4, "new"),
    StaticBook("1TH", "1 Thessalonians", 52, 5, "new"),
    StaticBook("2TH", "2 Thessalonians", 53, 3, "new"),
    StaticBook("1TI", "1 Timothy", 54, 6, "new"),
    StaticBook("2TI", "2 Timothy", 55, 4, "new"),
    StaticBook("TIT", "Titus", 56, 3, "new"),
    StaticBook("PHM", "Philemon", 57, 1, "new"),
    StaticBook("HEB", "Hebrews", 58, 13, "new"),
    StaticBook("JAS", "James", 59, 5, "new"),
    StaticBook("1PE", "1 Peter", 60, 5, "new"),
    StaticBook("2PE", "2 Peter", 61, 3, "new"),
    StaticBook("1JN", "1 John", 62, 5, "new"),
    StaticBook("2JN", "2 John", 63, 1, "new"),
    StaticBook("3JN", "3 John", 64, 1, "new"),
    StaticBook("JUD", "Jude", 65, 1, "new"),
    StaticBook("REV", "Revelation", 66, 22, "new"),
]

_BOOKS_BY_ID = {book.id: book for book in STATIC_BOOKS}

TOTAL_CHAPTERS = sum(book.chapters for book in STATIC_BOOKS)

DAILY_VERSES: list[VerseOfTheDay] = [
    VerseOfTheDay('Genesis 1:1', 'In the beginning God created the heavens and the earth.'),
    VerseOfTheDay('Psalm 23:1', 'The Lord is my shepherd, I shall not want.'),
    VerseOfTheDay('Matthew 5:3', 'Blessed are the poor in spirit, for theirs is the kingdom of heaven.'),
    VerseOfTheDay('John 3:16', 'For God so loved the world that he gave his one and only Son, that whoever believes in him shall not perish but have eternal life.'),
    VerseOfTheDay('Romans 8:28', 'And we know that in all things God works for the good of those who love him, who have been called according to his purpose.'),
    VerseOfTheDay('Philippians 4:13', 'I can do all things through Christ who strengthens me.'),
    VerseOfTheDay('James 1:5', 'If any of you lacks wisdom, you should ask God, who gives generously to all without finding fault, and it will be given to you.'),
    VerseOfTheDay('1 Peter 3:15', 'But in your hearts revere Christ as Lord. Always be prepared to give an answer to everyone who asks you to give the reason for the hope that you have.'),
    VerseOfTheDay('1 John 4:19', 'We love because he first loved us.'),
    VerseOfTheDay('Revelation 21:4', 'He will wipe every tear from their eyes. There will be no more death or mourning or crying or pain, for the old order of things has passed away.'),
    VerseOfTheDay('Isaiah 40:31', 'But those who hope in the Lord will renew their strength. They will soar on wings like eagles; they will run and not grow weary, they will walk and not be faint.'),
    VerseOfTheDay('Jeremiah 29:11', 'For I know the plans I have for you," declares the Lord, "plans to prosper you and not to harm you, to give you hope and a future.'),
    VerseOfTheDay('Proverbs 3:5', 'Trust in the Lord with all your heart and lean not on your own understanding.'),
    VerseOfTheDay('Joshua 1:9', 'Have I not commanded you? Be strong and courageous. Do not be afraid; do not be discouraged, for the Lord your God will be with you wherever you go.'),
    VerseOfTheDay('Psalm 46:10', 'Be still, and know that I am God; I will be exalted among the nations, I will be exalted in the earth.'),
    VerseOfTheDay('Matthew 11:28', 'Come to me, all you who are weary and burdened, and I will give you rest.'),
    VerseOfTheDay('Romans 12:2', 'Do not conform to the pattern of this world, but be transformed by the renewing of your mind. Then you will be able to test and approve what God\'s will is—his good, pleasing and perfect will.'),
    VerseOfTheDay('Ephesians 2:8', 'For it is by grace you have been saved, through faith—and this is not from yourselves, it is the gift of God.'),
    VerseOfTheDay('2 Timothy 1:7', 'For God has not given us a spirit of fear, but of power and of love and of a sound mind.'),
    VerseOfTheDay('Hebrews 11:1', 'Now faith is confidence in what we hope for and assurance about what we do not see.'),
    VerseOfTheDay('1 Corinthians 13:4', 'Love is patient, love is kind. It does not envy, it does not boast, it is not proud.'),
    VerseOfTheDay('Galatians 5:22', 'But the fruit of the Spirit is love, joy, peace, forbearance, kindness, goodness, faithfulness.'),
    VerseOfTheDay('Colossians 3:23', 'Whatever you do, work at it with all your heart, as working for the Lord, not for human masters.'),
    VerseOfTheDay('1 Thessalonians 5:16', 'Rejoice always, pray continually, give thanks in all circumstances; for this is God\'s will for you in Christ Jesus.'),
    VerseOfTheDay('Deuteronomy 6:5', 'Love the Lord your God with all your heart and with all your soul and with all your strength.'),
    VerseOfTheDay('Psalm 119:105', 'Your word is a lamp for my feet, a light on my path.'),
    VerseOfTheDay('Matthew 6:33', 'But seek first his kingdom and his righteousness, and all these things will be given to you as well.'),
    VerseOfTheDay('John 14:6', 'Jesus answered, "I am the way and the truth and the life. No one comes to the Father except through me."'),
    VerseOfTheDay('Acts 1:8', 'But you will receive power when the Holy Spirit comes on you; and you will be my witnesses in Jerusalem, and in all Judea and Samaria, and to the ends of the earth.'),
    VerseOfTheDay('2 Corinthians 5:17', 'Therefore, if anyone is in Christ, the new creation has come: The old has gone, the new is here!'),
]


def get_static_book(book_id: str) -> Optional[StaticBook]:
    return _BOOKS_BY_ID.get(book_id.upper())


def static_chapters(book_id: str) -> list[dict]:
    """Chapter entries 1..N for a book, in API chapter shape."""
    book = get_static_book(book_id)
    if book is None:
        return []
    return [
        {
            "id": f"{book.id}.{number}",
            "bookId": book.id,
            "number": str(number),
            "chapterNumber": number,
            "reference": f"{book.name} {number}",
        }
        for number in range(1, book.chapters + 1)
    ]
