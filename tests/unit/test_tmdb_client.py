"""Tests for TMDB API client."""

import urllib.parse

import pytest
import requests
from unittest.mock import Mock, patch

from stasher.api.exceptions import APIConnectionError, APIResponseError
from stasher.api.tmdb_client import TmdbClient, parse_date, poster_url, year_from_date
from stasher.models.media import MediaType


def routed_get(routes):
    """Build a requests.get replacement answering by URL path."""
    def fake_get(url, headers=None, timeout=None):
        path = urllib.parse.urlparse(url).path
        if path.startswith('/3'):
            path = path[2:]
        response = Mock()
        if path in routes:
            response.status_code = 200
            response.json.return_value = routes[path]
        else:
            response.status_code = 404
        return response
    return fake_get


MOVIE_ROUTES = {
    '/search/movie': {
        'results': [{'id': 9360, 'title': 'Anaconda', 'release_date': '1997-04-11'}],
    },
    '/movie/9360': {
        'id': 9360,
        'title': 'Anaconda',
        'release_date': '1997-04-11',
        'overview': 'A documentary crew is taken hostage.',
        'vote_average': 4.9,
        'poster_path': '/anaconda.jpg',
    },
    '/movie/9360/credits': {
        'cast': [
            {'name': 'Jennifer Lopez', 'character': 'Terri Flores'},
            {'name': 'Ice Cube', 'character': 'Danny Rich'},
            {'name': 'Jon Voight', 'character': 'Paul Sarone'},
            {'name': 'Eric Stoltz', 'character': 'Dr. Steven Cale'},
        ],
        'crew': [
            {'name': 'Alan Riche', 'job': 'Producer'},
            {'name': 'Luis Llosa', 'job': 'Director'},
        ],
    },
    '/movie/9360/release_dates': {
        'results': [
            {'iso_3166_1': 'FR', 'release_dates': [{'certification': 'U'}]},
            {'iso_3166_1': 'US', 'release_dates': [{'certification': 'PG-13'}]},
        ],
    },
}


def series_routes(episodes):
    """TMDB routes for a show whose season 1 holds the given episodes."""
    return {
        '/search/tv': {
            'results': [{'id': 1396, 'name': 'Show Name', 'first_air_date': '2015-03-01'}],
        },
        '/tv/1396': {
            'id': 1396,
            'name': 'Show Name',
            'first_air_date': '2015-03-01',
            'overview': 'A show about names.',
            'vote_average': 8.1,
            'poster_path': '/show.jpg',
        },
        '/tv/1396/credits': {'cast': [{'name': 'Actor One', 'character': 'Lead'}], 'crew': []},
        '/tv/1396/content_ratings': {'results': [{'iso_3166_1': 'US', 'rating': 'TV-MA'}]},
        '/tv/1396/season/1': {'episodes': episodes},
    }


class TestHelpers:
    """Tests for module-level helpers."""

    def test_parse_date(self):
        """Dates parse from the first ten characters."""
        assert parse_date('1997-04-11').year == 1997
        assert parse_date('2015-03-01T00:00:00Z').month == 3

    @pytest.mark.parametrize("value", [None, '', 'soon', 2015])
    def test_parse_date_invalid(self, value):
        """Invalid dates give None."""
        assert parse_date(value) is None

    def test_year_from_date(self):
        """The year of a date string is extracted."""
        assert year_from_date('2008-01-20') == 2008
        assert year_from_date(None) is None

    def test_poster_url(self):
        """Poster paths become absolute URLs."""
        assert poster_url('/x.jpg') == 'https://image.tmdb.org/t/p/w500/x.jpg'
        assert poster_url(None) is None


class TestTmdbClientBuildUrl:
    """Tests for URL building."""

    def test_build_url(self):
        """build_url adds key, language and parameters."""
        client = TmdbClient(api_key="test_key")
        url = client.build_url('/search/movie', query='Anaconda', year=1997)

        assert url.startswith('https://api.themoviedb.org/3/search/movie?')
        assert 'api_key=test_key' in url
        assert 'language=en-US' in url
        assert 'query=Anaconda' in url
        assert 'year=1997' in url

    def test_build_url_drops_none(self):
        """None parameters are left out."""
        url = TmdbClient(api_key="k").build_url('/search/tv', query='Show', first_air_date_year=None)
        assert 'first_air_date_year' not in url

    def test_build_url_encodes_query(self):
        """Spaces and punctuation are encoded."""
        url = TmdbClient(api_key="k").build_url('/search/tv', query="Grey's Anatomy")
        assert "query=Grey%27s+Anatomy" in url


class TestChooseCandidate:
    """Tests for candidate selection."""

    def test_single_result(self):
        """One result is taken as is."""
        results = [{'title': 'Something Else'}]
        assert TmdbClient.choose_candidate('Anaconda', results, None, 'title', 'release_date') == results[0]

    def test_year_filter(self):
        """A matching release year narrows the results."""
        results = [
            {'id': 1, 'title': 'Dune', 'release_date': '1984-12-14'},
            {'id': 2, 'title': 'Dune', 'release_date': '2021-09-15'},
        ]
        chosen = TmdbClient.choose_candidate('Dune', results, 2021, 'title', 'release_date')
        assert chosen['id'] == 2

    def test_fuzzy_fallback(self):
        """Without a year, the closest title wins."""
        results = [
            {'id': 1, 'name': 'The Office (UK)', 'original_name': 'The Office'},
            {'id': 2, 'name': 'The Office US', 'original_name': 'The Office'},
        ]
        chosen = TmdbClient.choose_candidate('The Office US', results, None, 'name', 'first_air_date')
        assert chosen['id'] == 2

    def test_no_results(self):
        """No results gives None."""
        assert TmdbClient.choose_candidate('x', [], None, 'title', 'release_date') is None


class TestTmdbClientFetchMovie:
    """Tests for movie lookups."""

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_no_api_key(self, api_key):
        """fetch_movie returns None without API key."""
        with patch('stasher.api.base.requests.get') as mock_get:
            assert TmdbClient(api_key=api_key).fetch_movie("Anaconda") is None
            mock_get.assert_not_called()

    @patch('stasher.api.base.requests.get')
    def test_fetch_movie(self, mock_get):
        """A movie is fully resolved from search, details, credits and rating."""
        mock_get.side_effect = routed_get(MOVIE_ROUTES)

        metadata = TmdbClient(api_key="test_key").fetch_movie("Anaconda", 1997)

        assert metadata.title == "Anaconda"
        assert metadata.media_type is MediaType.MOVIE
        assert metadata.year == 1997
        assert metadata.synopsis == "A documentary crew is taken hostage."
        assert metadata.rating == 49
        assert metadata.content_rating == "13"
        assert metadata.poster_url == "https://image.tmdb.org/t/p/w500/anaconda.jpg"
        assert metadata.cast == (
            "Jennifer Lopez (Terri Flores), Ice Cube (Danny Rich), "
            "Jon Voight (Paul Sarone), Director: Luis Llosa"
        )

    @patch('stasher.api.base.requests.get')
    def test_fetch_movie_no_results(self, mock_get):
        """An empty search gives None."""
        mock_get.side_effect = routed_get({'/search/movie': {'results': []}})
        assert TmdbClient(api_key="k").fetch_movie("Nothing") is None

    @patch('stasher.api.base.requests.get')
    def test_fetch_movie_search_failure_raises(self, mock_get):
        """A failing search propagates as APIError."""
        mock_get.side_effect = routed_get({})
        with pytest.raises(APIResponseError):
            TmdbClient(api_key="k").fetch_movie("Anaconda")

    @patch('stasher.api.base.requests.get')
    def test_missing_credits_and_rating(self, mock_get):
        """Failing credit and rating requests degrade to defaults."""
        routes = {k: v for k, v in MOVIE_ROUTES.items() if not k.endswith(('credits', 'release_dates'))}
        mock_get.side_effect = routed_get(routes)

        metadata = TmdbClient(api_key="k").fetch_movie("Anaconda", 1997)

        assert metadata.cast is None
        assert metadata.content_rating == "PG"


class TestTmdbClientFetchSeries:
    """Tests for series lookups."""

    @patch('stasher.api.base.requests.get')
    def test_fetch_series_episode(self, mock_get):
        """An aired episode gives its title."""
        mock_get.side_effect = routed_get(series_routes([
            {'episode_number': 1, 'name': 'Pilot', 'air_date': '2015-03-01'},
            {'episode_number': 2, 'name': 'The Second One', 'air_date': '2015-03-08'},
        ]))

        metadata = TmdbClient(api_key="k").fetch_series("Show Name", 1, 2)

        assert metadata.title == "Show Name"
        assert metadata.media_type is MediaType.SERIES
        assert metadata.year == 2015
        assert metadata.episode_title == "The Second One"
        assert (metadata.season, metadata.episode) == (1, 2)
        assert metadata.content_rating == "18"
        assert metadata.rating == 81

    @patch('stasher.api.base.requests.get')
    def test_future_episode_is_rejected(self, mock_get):
        """An episode airing in the future gives None."""
        mock_get.side_effect = routed_get(series_routes([
            {'episode_number': 2, 'name': 'Coming Soon', 'air_date': '2999-01-01'},
        ]))
        assert TmdbClient(api_key="k").fetch_series("Show Name", 1, 2) is None

    @pytest.mark.parametrize("entry", [
        {'episode_number': 2, 'name': '', 'air_date': '2015-03-08'},
        {'episode_number': 2, 'name': 'Untitled', 'air_date': None},
    ])
    def test_incomplete_episode_is_rejected(self, entry):
        """Episodes without title or air date give None."""
        with patch('stasher.api.base.requests.get') as mock_get:
            mock_get.side_effect = routed_get(series_routes([entry]))
            assert TmdbClient(api_key="k").fetch_series("Show Name", 1, 2) is None

    @patch('stasher.api.base.requests.get')
    def test_unknown_episode(self, mock_get):
        """An episode missing from the season gives None."""
        mock_get.side_effect = routed_get(series_routes([
            {'episode_number': 1, 'name': 'Pilot', 'air_date': '2015-03-01'},
        ]))
        assert TmdbClient(api_key="k").fetch_series("Show Name", 1, 9) is None

    @patch('stasher.api.base.requests.get')
    def test_single_episode_fallback(self, mock_get):
        """When the season listing fails, the episode endpoint is used."""
        routes = series_routes([])
        del routes['/tv/1396/season/1']
        routes['/tv/1396/season/1/episode/2'] = {'name': 'The Second One'}
        mock_get.side_effect = routed_get(routes)

        metadata = TmdbClient(api_key="k").fetch_series("Show Name", 1, 2)
        assert metadata.episode_title == "The Second One"

    @patch('stasher.api.base.requests.get')
    def test_show_without_episode(self, mock_get):
        """Without season and episode, the show alone is returned."""
        mock_get.side_effect = routed_get(series_routes([]))

        metadata = TmdbClient(api_key="k").fetch_series("Show Name")
        assert metadata.title == "Show Name"
        assert metadata.episode_title is None

    @patch('stasher.api.base.requests.get')
    def test_connection_error_propagates(self, mock_get):
        """Transport errors are raised for the resolver to handle."""
        mock_get.side_effect = requests.ConnectionError("down")

        with pytest.raises(APIConnectionError):
            TmdbClient(api_key="k").fetch_series("Show Name", 1, 2)


class TestTmdbClientDisplayTitle:
    """Tests for title-only lookups."""

    @patch('stasher.api.base.requests.get')
    def test_movie_title(self, mock_get, mock_tmdb_response):
        """The first movie result's title is returned."""
        mock_get.side_effect = routed_get({'/search/movie': mock_tmdb_response})
        assert TmdbClient(api_key="k").display_title("anaconda", MediaType.MOVIE) == "Anaconda"

    @patch('stasher.api.base.requests.get')
    def test_series_title(self, mock_get, mock_tmdb_series_response):
        """The first TV result's name is returned."""
        mock_get.side_effect = routed_get({'/search/tv': mock_tmdb_series_response})
        assert TmdbClient(api_key="k").display_title("breaking bad", MediaType.SERIES) == "Breaking Bad"

    @patch('stasher.api.base.requests.get')
    def test_no_results(self, mock_get):
        """No results gives None."""
        mock_get.side_effect = routed_get({'/search/movie': {'results': []}})
        assert TmdbClient(api_key="k").display_title("x", MediaType.MOVIE) is None
